# backoffice/repos/order_repo.py
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from backoffice.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita, wołający zamyka transakcję
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, status: str | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc())
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def update_status(
        self,
        order_id: str,
        status: str,
        now: datetime,
        payment_status: str | None = None,
    ) -> int:
        """UPDATE orders SET status ... WHERE id; zwraca liczbę zmienionych wierszy."""
        values = {"status": status, "updated_at": now}
        if payment_status is not None:
            values["payment_status"] = payment_status

        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def update_payment_status(self, order_id: str, payment_status: str, now: datetime) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(payment_status=payment_status, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def assign(self, order_id: str, employee_id: str | None, now: datetime) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(assigned_to=employee_id, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def list_assigned(self, employee_id: str) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.assigned_to == employee_id)
            .order_by(OrderModel.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
