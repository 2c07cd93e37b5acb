from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.data.models.employee import EmployeeModel


class EmployeeRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_employee(self, employee_id: str) -> EmployeeModel | None:
        return self.db.get(EmployeeModel, employee_id)

    def get_by_agent_id(self, agent_id: str) -> EmployeeModel | None:
        stmt = select(EmployeeModel).where(EmployeeModel.data["agent_id"].as_string() == agent_id)
        return self.db.execute(stmt).scalars().first()

    def list_employees(self, status: str | None = None) -> list[EmployeeModel]:
        stmt = select(EmployeeModel).order_by(EmployeeModel.created_at)
        if status:
            stmt = stmt.where(EmployeeModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def create_employee(self, employee: EmployeeModel) -> EmployeeModel:
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    def set_status(self, employee: EmployeeModel, status: str) -> EmployeeModel:
        employee.status = status
        self.db.commit()
        self.db.refresh(employee)
        return employee
