# backoffice/domain/statuses.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class QuoteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ProductStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class EmployeeRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class FulfillmentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    FAILED = "failed"


# dozwolone przejścia; ten sam status zawsze dozwolony (dopisanie notatki)
FULFILLMENT_TRANSITIONS: dict[FulfillmentStatus, frozenset[FulfillmentStatus]] = {
    FulfillmentStatus.PENDING: frozenset({FulfillmentStatus.PROCESSING, FulfillmentStatus.CANCELLED}),
    FulfillmentStatus.PROCESSING: frozenset(
        {FulfillmentStatus.SHIPPED, FulfillmentStatus.CANCELLED, FulfillmentStatus.FAILED}
    ),
    FulfillmentStatus.SHIPPED: frozenset({FulfillmentStatus.DELIVERED, FulfillmentStatus.FAILED}),
    FulfillmentStatus.FAILED: frozenset({FulfillmentStatus.PROCESSING, FulfillmentStatus.CANCELLED}),
    FulfillmentStatus.DELIVERED: frozenset(),
    FulfillmentStatus.CANCELLED: frozenset(),
}


def can_transition(current: FulfillmentStatus, new: FulfillmentStatus) -> bool:
    if current == new:
        return True
    return new in FULFILLMENT_TRANSITIONS[current]


def payment_status_for(order_status: OrderStatus) -> PaymentStatus | None:
    """Status płatności wynikający ze zmiany statusu zamówienia (None = bez zmian)."""
    if order_status == OrderStatus.CANCELLED:
        return PaymentStatus.REFUNDED
    if order_status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED):
        return PaymentStatus.PAID
    return None


def stock_status(inventory: list[dict]) -> ProductStatus:
    """Stan magazynowy z sumy wszystkich magazynów (minimum też sumowane)."""
    total = sum(entry.get("quantity", 0) for entry in inventory)
    minimum = sum(entry.get("minimum_stock", 0) for entry in inventory)
    if total == 0:
        return ProductStatus.OUT_OF_STOCK
    if total <= minimum:
        return ProductStatus.LOW_STOCK
    return ProductStatus.IN_STOCK
