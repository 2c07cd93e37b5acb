# backoffice/services/employee_service.py
from decimal import Decimal
from typing import List
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice.data.models.employee import EmployeeModel
from backoffice.data.models.order import OrderModel
from backoffice.domain.errors import AlreadyExists, EmployeeNotFound, InvalidInput, OrderNotFound
from backoffice.domain.schemas import (
    CommissionOut,
    CommissionSummary,
    EmployeeCreate,
    EmployeeRead,
    OrderOut,
)
from backoffice.domain.statuses import EmployeeStatus, OrderStatus
from backoffice.repos.employee_repo import EmployeeRepo
from backoffice.repos.order_repo import OrderRepo
from backoffice.services.costing import calculate_commission
from backoffice.services.order_service import order_to_out
from backoffice.utils.clock import ensure_utc, utcnow
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


def employee_to_read(employee: EmployeeModel) -> EmployeeRead:
    return EmployeeRead(
        id=employee.id,
        status=employee.status,
        created_at=ensure_utc(employee.created_at),
        **employee.data,
    )


class EmployeeService:
    """
    Pracownicy obsługujący zamówienia i ich prowizje.

    Prowizja = commission_rate% wartości (total) zamówienia przypisanego
    do pracownika. Anulowane zamówienia nie dają prowizji.

    commands: create_employee, deactivate_employee, assign_order
    query: get_employee, list_employees, commission_for_order, list_commissions
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = EmployeeRepo(db)
        self.orders = OrderRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_employee(self, employee_id: str) -> EmployeeRead:
        return employee_to_read(self._require(employee_id))

    def list_employees(self, status: EmployeeStatus | None = None) -> List[EmployeeRead]:
        return [employee_to_read(e) for e in self.repo.list_employees(status.value if status else None)]

    def commission_for_order(self, employee_id: str, order_id: str) -> CommissionOut:
        employee = self._require(employee_id)
        order = self.orders.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)
        if order.assigned_to != employee_id:
            raise InvalidInput(f"Order {order_id} is not assigned to employee {employee_id}")

        return self._commission(employee, order)

    def list_commissions(self, employee_id: str) -> CommissionSummary:
        employee = self._require(employee_id)

        items = [
            self._commission(employee, order)
            for order in self.orders.list_assigned(employee_id)
            if order.status != OrderStatus.CANCELLED.value
        ]
        return CommissionSummary(
            employee_id=employee_id,
            rate=self._rate(employee),
            orders=items,
            total_commission=sum((c.commission for c in items), Decimal("0.00")),
        )

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_employee(self, payload: EmployeeCreate) -> EmployeeRead:
        if self.repo.get_by_agent_id(payload.agent_id):
            raise AlreadyExists(f"Agent id {payload.agent_id} is already taken")

        employee = EmployeeModel(
            id=f"emp_{uuid4().hex[:12]}",
            status=EmployeeStatus.ACTIVE.value,
            data=payload.model_dump(mode="json"),
        )
        created = self.repo.create_employee(employee)

        logger.info(f"Employee {created.id} ({payload.agent_id}) created")
        return employee_to_read(created)

    def deactivate_employee(self, employee_id: str) -> EmployeeRead:
        employee = self._require(employee_id)
        try:
            employee = self.repo.set_status(employee, EmployeeStatus.INACTIVE.value)
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Employee {employee_id} deactivated")
        return employee_to_read(employee)

    def assign_order(self, order_id: str, employee_id: str | None) -> OrderOut:
        """
        Use Case: Przypisanie zamówienia do pracownika.

        employee_id=None odpina obecnego pracownika. Nieaktywny pracownik
        nie dostaje nowych zamówień.
        """
        if employee_id is not None:
            employee = self._require(employee_id)
            if employee.status != EmployeeStatus.ACTIVE.value:
                raise InvalidInput(f"Employee {employee_id} is inactive")

        try:
            if self.orders.assign(order_id, employee_id, utcnow()) == 0:
                raise OrderNotFound(order_id)
            self.orders.commit()
        except Exception:
            self.orders.rollback()
            raise

        logger.info(f"Order {order_id} assigned to {employee_id or 'nobody'}")
        return order_to_out(self.orders.get_order(order_id))

    # =====================================================
    # INTERNALS
    # =====================================================
    def _commission(self, employee: EmployeeModel, order: OrderModel) -> CommissionOut:
        total = Decimal(str((order.data or {}).get("total", "0.00")))
        rate = self._rate(employee)
        return CommissionOut(
            employee_id=employee.id,
            order_id=order.id,
            order_total=total,
            rate=rate,
            commission=calculate_commission(total, rate),
        )

    @staticmethod
    def _rate(employee: EmployeeModel) -> Decimal:
        payroll = (employee.data or {}).get("payroll") or {}
        return Decimal(str(payroll.get("commission_rate", "0")))

    def _require(self, employee_id: str) -> EmployeeModel:
        employee = self.repo.get_employee(employee_id)
        if not employee:
            raise EmployeeNotFound(employee_id)
        return employee
