from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self, category: str | None = None, status: str | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.id)
        if category:
            stmt = stmt.where(ProductModel.category == category)
        if status:
            stmt = stmt.where(ProductModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def refresh(self, product: ProductModel) -> ProductModel:
        self.db.refresh(product)
        return product

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
