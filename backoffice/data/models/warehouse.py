from sqlalchemy import Column, String, DateTime

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class WarehouseModel(Base):
    __tablename__ = "warehouses"

    id = Column(String, primary_key=True)  # WH-1, WH-2 ...
    data = Column(Document, nullable=False, default=dict)  # name, location, capacity, is_active
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
