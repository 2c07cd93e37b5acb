from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class TransportQuoteModel(Base):
    __tablename__ = "transport_quotes"

    id = Column(String, primary_key=True)
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    # pending, accepted, rejected, expired
    status = Column(String, nullable=False, default="pending", index=True)
    valid_until = Column(DateTime(timezone=True), nullable=False)

    # provider, method, cost, estimated_days, distance, total_weight, total_value, insurance
    data = Column(Document, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    order = relationship("OrderModel", back_populates="quotes")
