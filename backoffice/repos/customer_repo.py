from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.data.models.customer import CustomerModel


class CustomerRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: str) -> CustomerModel | None:
        return self.db.get(CustomerModel, customer_id)

    def list_customers(self) -> list[CustomerModel]:
        stmt = select(CustomerModel).order_by(CustomerModel.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def create_customer(self, customer: CustomerModel) -> CustomerModel:
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer
