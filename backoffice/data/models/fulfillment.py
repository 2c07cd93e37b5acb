from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class FulfillmentModel(Base):
    __tablename__ = "fulfillments"

    id = Column(String, primary_key=True)
    # jedno fulfillment na zamówienie
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)

    status = Column(String, nullable=False, default="pending")

    # carrier, tracking_number, estimated_delivery, transport_quote_id, history[]
    data = Column(Document, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    order = relationship("OrderModel", back_populates="fulfillment")
