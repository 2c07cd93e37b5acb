from sqlalchemy import Column, String, DateTime, ForeignKey

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True)
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    fulfillment_id = Column(String, nullable=False)

    # method, note, receipt_path, receipt_filename, receipt_size, confirmed_by
    data = Column(Document, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
