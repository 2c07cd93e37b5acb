# backoffice/services/transport_service.py
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, List
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice.data.models.transport_quote import TransportQuoteModel
from backoffice.data.models.warehouse import WarehouseModel
from backoffice.domain.errors import (
    AcceptanceFailed,
    MissingShippingAddress,
    OrderNotFound,
    OrderNotQuotable,
    QuoteAlreadyChosen,
    QuoteConflict,
    QuoteExpired,
    QuoteNotFound,
    QuoteNotPending,
    WarehouseNotFound,
)
from backoffice.domain.schemas import AcceptanceOut, Address, TransportQuoteOut
from backoffice.domain.statuses import FulfillmentStatus, OrderStatus, QuoteStatus
from backoffice.providers import DistanceProvider, get_distance_provider
from backoffice.repos.fulfillment_repo import FulfillmentRepo
from backoffice.repos.order_repo import OrderRepo
from backoffice.repos.quote_repo import QuoteRepo
from backoffice.repos.warehouse_repo import WarehouseRepo
from backoffice.services.costing import (
    calculate_cost,
    calculate_insurance,
    estimate_delivery_days,
    round2,
)
from backoffice.services.fulfillment_service import (
    fulfillment_to_out,
    new_fulfillment,
    record_status,
)
from backoffice.services.order_service import order_to_out
from backoffice.utils.clock import utcnow, ensure_utc
from backoffice.utils.logging import get_logger
from backoffice.utils.retry import db_conflict_retry
from backoffice.utils.settings import DEFAULT_WAREHOUSE_ID, QUOTE_VALIDITY_HOURS

logger = get_logger(__name__)

ACCEPTED_NOTE = "Transport quote accepted"

# po akceptacji oferty zamówienie przechodzi do processing i nie jest już wyceniane
QUOTABLE_ORDER_STATUSES = {OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value}


def quote_to_out(quote: TransportQuoteModel) -> TransportQuoteOut:
    data = quote.data or {}
    return TransportQuoteOut(
        id=quote.id,
        order_id=quote.order_id,
        provider=data["provider"],
        method=data["method"],
        cost=data["cost"],
        estimated_days=data["estimated_days"],
        distance=data["distance"],
        total_weight=data["total_weight"],
        total_value=data["total_value"],
        insurance=data["insurance"],
        status=quote.status,
        valid_until=ensure_utc(quote.valid_until),
        created_at=ensure_utc(quote.created_at),
    )


class TransportService:
    """
    Oferty transportu dla zamówień.

    commands: generate_quote, accept_quote, expire_stale_quotes
    query: get_quote, list_quotes
    """

    def __init__(
        self,
        db: Session,
        distance_provider: DistanceProvider | None = None,
        default_warehouse_id: str | None = DEFAULT_WAREHOUSE_ID,
        validity_hours: int = QUOTE_VALIDITY_HOURS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.quotes = QuoteRepo(db)
        self.orders = OrderRepo(db)
        self.warehouses = WarehouseRepo(db)
        self.fulfillments = FulfillmentRepo(db)
        self.distance_provider = distance_provider or get_distance_provider()
        self.default_warehouse_id = default_warehouse_id
        self.validity = timedelta(hours=validity_hours)
        self.clock = clock

    # =====================================================
    # QUERY
    # =====================================================
    def get_quote(self, quote_id: str) -> TransportQuoteOut:
        quote = self.quotes.get_quote(quote_id)
        if not quote:
            raise QuoteNotFound(quote_id)
        return quote_to_out(quote)

    def list_quotes(self, order_id: str, active_only: bool = False) -> List[TransportQuoteOut]:
        if not self.orders.get_order(order_id):
            raise OrderNotFound(order_id)
        rows = self.quotes.list_for_order(order_id, active_only=active_only, now=self.clock())
        return [quote_to_out(q) for q in rows]

    # =====================================================
    # COMMANDS
    # =====================================================
    def generate_quote(self, order_id: str, provider: str, method: str = "standard") -> TransportQuoteOut:
        """
        Use Case: Wycena transportu dla zamówienia.

        1. Zamówienie musi być otwarte i bez zaakceptowanej oferty
        2. Wymaga adresu wysyłki
        3. Ustala magazyn źródłowy (pierwsza pozycja albo skonfigurowany domyślny)
        4. Dystans z DistanceProvider, waga i wartość z pozycji
        5. Zapisuje ofertę pending ważną 24h
        """
        order = self.orders.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        if order.status not in QUOTABLE_ORDER_STATUSES:
            raise OrderNotQuotable(order_id, order.status)
        if self.quotes.has_accepted(order_id):
            raise QuoteAlreadyChosen(order_id)

        data = order.data or {}
        raw_address = (data.get("shipping") or {}).get("address")
        if not raw_address:
            raise MissingShippingAddress(order_id)

        items = data.get("items") or []
        warehouse = self._resolve_warehouse(items)

        destination = Address(**raw_address).one_line()
        distance = self.distance_provider.distance_km(warehouse.data["location"], destination)

        # brak wagi na pozycji = 1 kg
        total_weight = sum(float(item.get("weight") or 1) * item["quantity"] for item in items)
        total_value = round2(
            sum((Decimal(str(item["price"])) * item["quantity"] for item in items), Decimal("0"))
        )

        cost = calculate_cost(distance, total_weight)
        estimated_days = estimate_delivery_days(distance)
        insurance = calculate_insurance(total_value)

        now = self.clock()
        quote = TransportQuoteModel(
            id=f"tq_{uuid4().hex[:12]}",
            order_id=order_id,
            status=QuoteStatus.PENDING.value,
            valid_until=now + self.validity,
            data={
                "provider": provider,
                "method": method,
                "cost": str(cost),
                "estimated_days": estimated_days,
                "distance": distance,
                "origin_warehouse_id": warehouse.id,
                "total_weight": total_weight,
                "total_value": str(total_value),
                "insurance": insurance.model_dump(mode="json"),
            },
            created_at=now,
            updated_at=now,
        )
        created = self.quotes.add_quote(quote)

        logger.info(
            f"Quote {created.id} for order {order_id}: {provider}/{method} "
            f"{distance} km, {total_weight} kg -> {cost}"
        )
        return quote_to_out(created)

    def accept_quote(self, quote_id: str, order_id: str) -> AcceptanceOut:
        """
        Use Case: Akceptacja oferty (jedna transakcja).

        1. Wybrana oferta accepted, pozostałe pending -> rejected (jedno UPDATE)
        2. Zamówienie -> processing
        3. Fulfillment -> processing + wpis w historii

        Błędy reguł biznesowych wychodzą bez zmian, wszystko inne
        (po wycofaniu transakcji) jako AcceptanceFailed.
        """
        try:
            changed = self._accept_once(quote_id, order_id)
        except (QuoteNotFound, QuoteConflict):
            raise
        except Exception as e:
            logger.error(f"Accepting quote {quote_id} for order {order_id} failed: {e}")
            raise AcceptanceFailed(quote_id, e) from e

        quote = self.quotes.get_quote(quote_id)
        order = self.orders.get_order(order_id)
        fulfillment = self.fulfillments.get_by_order(order_id)

        return AcceptanceOut(
            quote=quote_to_out(quote),
            order=order_to_out(order),
            fulfillment=fulfillment_to_out(fulfillment),
            already_accepted=not changed,
        )

    def expire_stale_quotes(self) -> int:
        now = self.clock()
        try:
            count = self.quotes.expire_stale(now)
            self.quotes.commit()
        except Exception:
            self.quotes.rollback()
            raise

        if count:
            logger.info(f"Expired {count} stale transport quotes")
        return count

    # =====================================================
    # INTERNALS
    # =====================================================
    @db_conflict_retry()
    def _accept_once(self, quote_id: str, order_id: str) -> bool:
        now = self.clock()

        quote = self.quotes.get_quote(quote_id)
        if not quote or quote.order_id != order_id:
            raise QuoteNotFound(quote_id)

        if quote.status == QuoteStatus.ACCEPTED.value:
            logger.info(f"Quote {quote_id} already accepted, nothing to do")
            return False

        if quote.status != QuoteStatus.PENDING.value:
            raise QuoteNotPending(quote_id, quote.status)

        if ensure_utc(quote.valid_until) < now:
            raise QuoteExpired(quote_id)

        if self.quotes.has_accepted(order_id):
            raise QuoteAlreadyChosen(order_id)

        try:
            rowcount = self.quotes.accept_for_order(quote_id, order_id, now)
            if rowcount == 0:
                # inna akceptacja dla tego zamówienia była pierwsza
                self.quotes.rollback()
                current = self.quotes.refresh(quote).status
                if current == QuoteStatus.ACCEPTED.value:
                    return False
                if current == QuoteStatus.PENDING.value:
                    raise QuoteAlreadyChosen(order_id)
                raise QuoteNotPending(quote_id, current)

            if self.orders.update_status(order_id, OrderStatus.PROCESSING.value, now) == 0:
                raise OrderNotFound(order_id)

            self._upsert_fulfillment(order_id, quote, now)
            self.quotes.commit()

        except QuoteConflict:
            raise
        except Exception:
            self.quotes.rollback()
            raise

        logger.info(f"Quote {quote_id} accepted for order {order_id}")
        return True

    def _upsert_fulfillment(self, order_id: str, quote: TransportQuoteModel, now: datetime):
        data = quote.data or {}
        fields = {
            "carrier": data.get("provider"),
            "transport_quote_id": quote.id,
            "estimated_delivery": (now + timedelta(days=data.get("estimated_days", 0))).isoformat(),
        }

        fulfillment = self.fulfillments.get_by_order(order_id)
        if fulfillment is None:
            fulfillment = new_fulfillment(order_id, FulfillmentStatus.PROCESSING, now, ACCEPTED_NOTE)
            fulfillment.data = {**fulfillment.data, **fields}
            self.fulfillments.add_fulfillment(fulfillment)
        else:
            record_status(fulfillment, FulfillmentStatus.PROCESSING, now, ACCEPTED_NOTE, **fields)
        self.db.flush()

    def _resolve_warehouse(self, items: list) -> WarehouseModel:
        warehouse_id = None
        if items:
            warehouse_id = items[0].get("warehouse_id")
        warehouse_id = warehouse_id or self.default_warehouse_id

        if not warehouse_id:
            raise WarehouseNotFound(None)

        warehouse = self.warehouses.get_warehouse(warehouse_id)
        if not warehouse:
            raise WarehouseNotFound(warehouse_id)
        return warehouse
