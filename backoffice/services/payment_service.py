# backoffice/services/payment_service.py
from pathlib import Path
from typing import List
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice.data.models.payment import PaymentModel
from backoffice.domain.errors import FulfillmentNotFound, InvalidInput, OrderNotFound
from backoffice.domain.schemas import PaymentOut
from backoffice.domain.statuses import FulfillmentStatus, PaymentStatus
from backoffice.repos.fulfillment_repo import FulfillmentRepo
from backoffice.repos.order_repo import OrderRepo
from backoffice.repos.payment_repo import PaymentRepo
from backoffice.services.fulfillment_service import record_status
from backoffice.utils.clock import utcnow, ensure_utc
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


def payment_to_out(payment: PaymentModel) -> PaymentOut:
    data = payment.data or {}
    return PaymentOut(
        id=payment.id,
        order_id=payment.order_id,
        fulfillment_id=payment.fulfillment_id,
        method=data["method"],
        note=data.get("note"),
        receipt_filename=data["receipt_filename"],
        receipt_size=data["receipt_size"],
        confirmed_by=data["confirmed_by"],
        created_at=ensure_utc(payment.created_at),
    )


class PaymentService:
    """
    Potwierdzenie płatności za realizację: zapis paragonu na dysk,
    rekord płatności, zamówienie -> paid, notatka w historii fulfillment.
    """

    def __init__(self, db: Session, receipt_dir: str):
        self.db = db
        self.repo = PaymentRepo(db)
        self.orders = OrderRepo(db)
        self.fulfillments = FulfillmentRepo(db)
        self.receipt_dir = Path(receipt_dir)

    # =====================================================
    # QUERY
    # =====================================================
    def list_payments(self, order_id: str) -> List[PaymentOut]:
        if not self.orders.get_order(order_id):
            raise OrderNotFound(order_id)
        return [payment_to_out(p) for p in self.repo.list_for_order(order_id)]

    # =====================================================
    # COMMANDS
    # =====================================================
    def confirm_payment(
        self,
        fulfillment_id: str,
        method: str,
        user_id: str,
        filename: str,
        content: bytes,
        note: str | None = None,
    ) -> PaymentOut:
        if not content:
            raise InvalidInput("Receipt file is empty")

        fulfillment = self.fulfillments.get_fulfillment(fulfillment_id)
        if not fulfillment:
            raise FulfillmentNotFound(fulfillment_id)

        now = utcnow()
        payment_id = f"pay_{uuid4().hex[:12]}"
        safe_name = Path(filename or "receipt").name
        receipt_path = self.receipt_dir / f"{payment_id}_{safe_name}"

        payment = PaymentModel(
            id=payment_id,
            order_id=fulfillment.order_id,
            fulfillment_id=fulfillment.id,
            data={
                "method": method,
                "note": note,
                "receipt_path": str(receipt_path),
                "receipt_filename": safe_name,
                "receipt_size": len(content),
                "confirmed_by": user_id,
            },
            created_at=now,
        )

        written = False
        try:
            self.repo.add_payment(payment)
            self.orders.update_payment_status(fulfillment.order_id, PaymentStatus.PAID.value, now)
            record_status(
                fulfillment,
                FulfillmentStatus(fulfillment.status),
                now,
                f"Payment confirmed via {method}",
            )

            self.receipt_dir.mkdir(parents=True, exist_ok=True)
            receipt_path.write_bytes(content)
            written = True

            self.db.commit()
        except Exception:
            self.db.rollback()
            if written:
                receipt_path.unlink(missing_ok=True)
            raise

        logger.info(f"Payment {payment_id} confirmed for order {payment.order_id} by {user_id}")
        return payment_to_out(payment)
