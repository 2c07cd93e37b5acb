# backoffice/services/costing.py
"""
Wyceny transportu: koszt, czas dostawy i ubezpieczenie.

Stałe są zaszyte na sztywno, bez konfiguracji.
"""
import math
from decimal import Decimal, ROUND_HALF_UP

from backoffice.domain.errors import InvalidInput
from backoffice.domain.schemas import Insurance

BASE_RATE = Decimal("100")
PER_KM_RATE = Decimal("0.5")
PER_KG_RATE = Decimal("0.1")

INSURANCE_THRESHOLD = Decimal("10000")
INSURANCE_RATE = Decimal("0.001")

TAX_RATE = Decimal("0.10")

_CENT = Decimal("0.01")


def round2(value) -> Decimal:
    """Zaokrąglenie do groszy, połówki w górę."""
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def calculate_cost(distance, weight) -> Decimal:
    """baseRate + distance * perKm + weight * perKg."""
    if distance < 0:
        raise InvalidInput(f"Distance must not be negative, got {distance}")
    if weight < 0:
        raise InvalidInput(f"Weight must not be negative, got {weight}")

    total = BASE_RATE + Decimal(str(distance)) * PER_KM_RATE + Decimal(str(weight)) * PER_KG_RATE
    return round2(total)


def estimate_delivery_days(distance) -> int:
    if distance < 0:
        raise InvalidInput(f"Distance must not be negative, got {distance}")

    if distance < 100:
        return 1
    if distance < 500:
        return 2
    if distance < 1000:
        return 3
    return math.ceil(distance / 500)


def calculate_insurance(total_value) -> Insurance:
    # powyżej progu ubezpieczenie jest w cenie
    value = Decimal(str(total_value))
    if value < 0:
        raise InvalidInput(f"Declared value must not be negative, got {total_value}")

    included = value > INSURANCE_THRESHOLD
    cost = Decimal("0.00") if included else round2(value * INSURANCE_RATE)
    return Insurance(included=included, coverage=round2(value), cost=cost)


def calculate_tax(subtotal) -> Decimal:
    return round2(Decimal(str(subtotal)) * TAX_RATE)


def calculate_commission(order_total, rate) -> Decimal:
    """Prowizja = rate% wartości zamówienia."""
    rate = Decimal(str(rate))
    if rate < 0:
        raise InvalidInput(f"Commission rate must not be negative, got {rate}")
    return round2(Decimal(str(order_total)) * rate / Decimal("100"))
