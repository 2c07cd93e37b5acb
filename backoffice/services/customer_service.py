from typing import List
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice.data.models.customer import CustomerModel
from backoffice.domain.errors import CustomerNotFound
from backoffice.domain.schemas import CustomerCreate, CustomerRead
from backoffice.repos.customer_repo import CustomerRepo
from backoffice.utils.clock import ensure_utc


def _to_read(customer: CustomerModel) -> CustomerRead:
    return CustomerRead(id=customer.id, created_at=ensure_utc(customer.created_at), **customer.data)


class CustomerService:
    def __init__(self, db: Session):
        self.repo = CustomerRepo(db)

    def create_customer(self, payload: CustomerCreate) -> CustomerRead:
        customer = CustomerModel(id=f"cus_{uuid4().hex[:12]}", data=payload.model_dump())
        return _to_read(self.repo.create_customer(customer))

    def get_customer(self, customer_id: str) -> CustomerRead:
        customer = self.repo.get_customer(customer_id)
        if not customer:
            raise CustomerNotFound(customer_id)
        return _to_read(customer)

    def list_customers(self) -> List[CustomerRead]:
        return [_to_read(c) for c in self.repo.list_customers()]
