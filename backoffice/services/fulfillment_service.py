# backoffice/services/fulfillment_service.py
from datetime import datetime
from typing import List
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice.data.models.fulfillment import FulfillmentModel
from backoffice.domain.errors import FulfillmentNotFound, InvalidInput, InvalidStatusTransition
from backoffice.domain.schemas import FulfillmentOut, HistoryEntry
from backoffice.domain.statuses import FulfillmentStatus, can_transition
from backoffice.repos.fulfillment_repo import FulfillmentRepo
from backoffice.utils.clock import utcnow, ensure_utc
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


def new_fulfillment(order_id: str, status: FulfillmentStatus, now: datetime, note: str | None = None) -> FulfillmentModel:
    entry = HistoryEntry(status=status, timestamp=now, note=note)
    return FulfillmentModel(
        id=f"ful_{uuid4().hex[:12]}",
        order_id=order_id,
        status=status.value,
        data={"history": [entry.model_dump(mode="json")]},
        created_at=now,
        updated_at=now,
    )


def record_status(
    fulfillment: FulfillmentModel,
    status: FulfillmentStatus,
    now: datetime,
    note: str | None = None,
    **fields,
) -> FulfillmentModel:
    """
    Ustawia status i dopisuje wpis do historii. Historia tylko rośnie,
    istniejące wpisy nie są nadpisywane.
    """
    current = FulfillmentStatus(fulfillment.status)
    if not can_transition(current, status):
        raise InvalidStatusTransition(current.value, status.value)

    entry = HistoryEntry(status=status, timestamp=now, note=note)
    data = dict(fulfillment.data or {})
    data["history"] = list(data.get("history", [])) + [entry.model_dump(mode="json")]
    data.update(fields)

    # nowy dict, żeby SQLAlchemy zauważył zmianę kolumny JSON
    fulfillment.data = data
    fulfillment.status = status.value
    fulfillment.updated_at = now
    return fulfillment


def fulfillment_to_out(fulfillment: FulfillmentModel) -> FulfillmentOut:
    data = fulfillment.data or {}
    return FulfillmentOut(
        id=fulfillment.id,
        order_id=fulfillment.order_id,
        status=fulfillment.status,
        carrier=data.get("carrier"),
        tracking_number=data.get("tracking_number"),
        estimated_delivery=data.get("estimated_delivery"),
        actual_delivery=data.get("actual_delivery"),
        transport_quote_id=data.get("transport_quote_id"),
        history=data.get("history", []),
        created_at=ensure_utc(fulfillment.created_at),
        updated_at=ensure_utc(fulfillment.updated_at),
    )


class FulfillmentService:
    """
    Śledzenie realizacji zamówienia: status + historia zmian.
    Przejścia statusów wg FULFILLMENT_TRANSITIONS.
    """

    def __init__(self, db: Session):
        self.repo = FulfillmentRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_fulfillment(self, order_id: str) -> FulfillmentOut:
        return fulfillment_to_out(self._require(order_id))

    def list_fulfillments(self, status: FulfillmentStatus | None = None) -> List[FulfillmentOut]:
        rows = self.repo.list_fulfillments(status.value if status else None)
        return [fulfillment_to_out(f) for f in rows]

    # =====================================================
    # COMMANDS
    # =====================================================
    def update_status(
        self,
        order_id: str,
        status: FulfillmentStatus,
        note: str | None = None,
    ) -> FulfillmentOut:
        fulfillment = self._require(order_id)
        now = utcnow()

        extra = {}
        if status == FulfillmentStatus.DELIVERED:
            extra["actual_delivery"] = now.isoformat()

        try:
            record_status(fulfillment, status, now, note, **extra)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Fulfillment for order {order_id} -> {status.value}")
        return fulfillment_to_out(self.repo.refresh(fulfillment))

    def add_tracking(
        self,
        order_id: str,
        carrier: str,
        tracking_number: str,
        estimated_delivery: datetime | None = None,
    ) -> FulfillmentOut:
        fulfillment = self._require(order_id)
        now = utcnow()

        fields = {"carrier": carrier, "tracking_number": tracking_number}
        if estimated_delivery is not None:
            fields["estimated_delivery"] = ensure_utc(estimated_delivery).isoformat()

        try:
            # status bez zmian, sama notatka w historii
            record_status(
                fulfillment,
                FulfillmentStatus(fulfillment.status),
                now,
                f"Tracking added: {carrier} - {tracking_number}",
                **fields,
            )
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Tracking {carrier}/{tracking_number} added for order {order_id}")
        return fulfillment_to_out(self.repo.refresh(fulfillment))

    def mark_shipped(self, order_id: str) -> FulfillmentOut:
        fulfillment = self._require(order_id)
        data = fulfillment.data or {}

        if not data.get("tracking_number"):
            raise InvalidInput("Cannot mark as shipped without tracking information")

        carrier = data.get("carrier") or "unknown carrier"
        return self.update_status(order_id, FulfillmentStatus.SHIPPED, f"Order shipped via {carrier}")

    def mark_delivered(self, order_id: str) -> FulfillmentOut:
        return self.update_status(order_id, FulfillmentStatus.DELIVERED, "Order delivered successfully")

    def _require(self, order_id: str) -> FulfillmentModel:
        fulfillment = self.repo.get_by_order(order_id)
        if not fulfillment:
            raise FulfillmentNotFound(order_id)
        return fulfillment
