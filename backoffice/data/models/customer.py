from sqlalchemy import Column, String, DateTime

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class CustomerModel(Base):
    __tablename__ = "customers"

    id = Column(String, primary_key=True)
    data = Column(Document, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
