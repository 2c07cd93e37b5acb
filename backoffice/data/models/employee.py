from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class EmployeeModel(Base):
    __tablename__ = "employees"

    id = Column(String, primary_key=True)
    status = Column(String, nullable=False, default="active")  # active, inactive

    # agent_id, name, email, phone, role, payroll {commission_rate, base_rate, currency, payment_frequency}
    data = Column(Document, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    orders = relationship("OrderModel", back_populates="assignee")
