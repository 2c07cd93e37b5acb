"""Tests for employees, order assignment and commissions."""

from decimal import Decimal

import pytest

from backoffice.domain.errors import AlreadyExists, EmployeeNotFound, InvalidInput, OrderNotFound
from backoffice.domain.schemas import EmployeeCreate
from backoffice.domain.statuses import EmployeeStatus, OrderStatus
from backoffice.services.employee_service import EmployeeService
from backoffice.services.order_service import OrderService


@pytest.fixture
def employees(db):
    return EmployeeService(db)


@pytest.fixture
def employee(employees):
    return employees.create_employee(
        EmployeeCreate(
            agent_id="AG-1",
            name="Sam Ortiz",
            email="sam@seller.test",
            payroll={"commission_rate": "3", "base_rate": "18.50", "payment_frequency": "biweekly"},
        )
    )


class TestEmployees:
    def test_create(self, employees, employee):
        assert employee.id.startswith("emp_")
        assert employee.status == EmployeeStatus.ACTIVE
        assert employees.get_employee(employee.id).payroll.commission_rate == Decimal("3")

    def test_duplicate_agent_id(self, employees, employee):
        with pytest.raises(AlreadyExists):
            employees.create_employee(EmployeeCreate(agent_id="AG-1", name="Other", email="o@seller.test"))

    def test_deactivate(self, employees, employee):
        employees.deactivate_employee(employee.id)

        assert employees.list_employees(EmployeeStatus.ACTIVE) == []
        assert [e.id for e in employees.list_employees(EmployeeStatus.INACTIVE)] == [employee.id]

    def test_unknown_employee(self, employees):
        with pytest.raises(EmployeeNotFound):
            employees.get_employee("emp_missing")


class TestAssignment:
    def test_assign_and_unassign(self, employees, employee, order):
        assert employees.assign_order(order.id, employee.id).assigned_to == employee.id

        assert employees.assign_order(order.id, None).assigned_to is None

    def test_inactive_employee_refused(self, employees, employee, order):
        employees.deactivate_employee(employee.id)

        with pytest.raises(InvalidInput):
            employees.assign_order(order.id, employee.id)

    def test_unknown_order(self, employees, employee):
        with pytest.raises(OrderNotFound):
            employees.assign_order("ord_missing", employee.id)


class TestCommission:
    def test_rate_percent_of_order_total(self, employees, employee, order):
        employees.assign_order(order.id, employee.id)

        commission = employees.commission_for_order(employee.id, order.id)

        assert commission.order_total == Decimal("5500.00")
        assert commission.rate == Decimal("3")
        assert commission.commission == Decimal("165.00")

    def test_order_not_assigned(self, employees, employee, order):
        with pytest.raises(InvalidInput):
            employees.commission_for_order(employee.id, order.id)

    def test_summary_skips_cancelled_orders(self, db, employees, employee, order_factory):
        kept = order_factory()
        dropped = order_factory(shipping_cost="100.00")
        for o in (kept, dropped):
            employees.assign_order(o.id, employee.id)
        OrderService(db).update_order_status(dropped.id, OrderStatus.CANCELLED)

        summary = employees.list_commissions(employee.id)

        assert [c.order_id for c in summary.orders] == [kept.id]
        assert summary.total_commission == Decimal("165.00")
