from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def list_for_order(self, order_id: str) -> list[PaymentModel]:
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id)
            .order_by(PaymentModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
