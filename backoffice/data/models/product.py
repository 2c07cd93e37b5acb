from sqlalchemy import Column, String, DateTime

from backoffice.data.database import Base, Document
from backoffice.utils.clock import utcnow


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)  # EX-001, CR-001 ...
    category = Column(String, nullable=False, index=True)

    # in_stock, low_stock, out_of_stock, discontinued
    status = Column(String, nullable=False, default="out_of_stock", index=True)

    # name, model, sku, price, weight, specifications, inventory [{warehouse_id, quantity, minimum_stock, last_updated}]
    data = Column(Document, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
