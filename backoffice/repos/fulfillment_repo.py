from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.data.models.fulfillment import FulfillmentModel


class FulfillmentRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_order(self, order_id: str) -> FulfillmentModel | None:
        stmt = select(FulfillmentModel).where(FulfillmentModel.order_id == order_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_fulfillment(self, fulfillment_id: str) -> FulfillmentModel | None:
        return self.db.get(FulfillmentModel, fulfillment_id)

    def list_fulfillments(self, status: str | None = None) -> list[FulfillmentModel]:
        stmt = select(FulfillmentModel).order_by(FulfillmentModel.updated_at.desc())
        if status:
            stmt = stmt.where(FulfillmentModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def add_fulfillment(self, fulfillment: FulfillmentModel) -> FulfillmentModel:
        self.db.add(fulfillment)
        self.db.flush()
        return fulfillment

    def refresh(self, fulfillment: FulfillmentModel) -> FulfillmentModel:
        self.db.refresh(fulfillment)
        return fulfillment

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
