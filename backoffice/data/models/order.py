from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    customer_id = Column(String, ForeignKey("customers.id"), nullable=False, index=True)
    assigned_to = Column(String, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)

    status = Column(String, nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    payment_status = Column(String, nullable=False, default="pending")  # pending, paid, failed, refunded

    # items, shipping, subtotal/tax/shipping_cost/total, notes
    data = Column(Document, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    quotes = relationship(
        "TransportQuoteModel",
        back_populates="order",
        cascade="all, delete-orphan",
    )
    fulfillment = relationship(
        "FulfillmentModel",
        back_populates="order",
        uselist=False,
        cascade="all, delete-orphan",
    )
    assignee = relationship("EmployeeModel", back_populates="orders")
