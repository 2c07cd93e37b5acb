# backoffice/services/product_service.py
from typing import List

from sqlalchemy.orm import Session

from backoffice.data.models.product import ProductModel
from backoffice.domain.errors import AlreadyExists, InvalidInput, ProductNotFound, WarehouseNotFound
from backoffice.domain.schemas import ProductCreate, ProductRead
from backoffice.domain.statuses import ProductStatus, stock_status
from backoffice.repos.product_repo import ProductRepo
from backoffice.repos.warehouse_repo import WarehouseRepo
from backoffice.utils.clock import ensure_utc, utcnow
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


def product_to_read(product: ProductModel) -> ProductRead:
    data = product.data or {}
    inventory = data.get("inventory", [])
    return ProductRead(
        id=product.id,
        category=product.category,
        status=product.status,
        name=data["name"],
        model=data.get("model"),
        sku=data["sku"],
        price=data["price"],
        weight=data.get("weight"),
        specifications=data.get("specifications", {}),
        inventory=inventory,
        total_stock=sum(entry["quantity"] for entry in inventory),
        created_at=ensure_utc(product.created_at),
        updated_at=ensure_utc(product.updated_at),
    )


def pick_warehouse(product: ProductModel, quantity: int) -> str | None:
    """Pierwszy magazyn, który ma co najmniej `quantity` sztuk produktu."""
    for entry in (product.data or {}).get("inventory", []):
        if entry["quantity"] >= quantity:
            return entry["warehouse_id"]
    return None


class ProductService:
    """
    Katalog produktów: cena, waga i stany w magazynach.

    commands: create_product, update_inventory, discontinue_product
    query: get_product, list_products
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.warehouses = WarehouseRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_product(self, product_id: str) -> ProductRead:
        return product_to_read(self._require(product_id))

    def list_products(
        self,
        category: str | None = None,
        status: ProductStatus | None = None,
    ) -> List[ProductRead]:
        rows = self.repo.list_products(category, status.value if status else None)
        return [product_to_read(p) for p in rows]

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_product(self, payload: ProductCreate) -> ProductRead:
        if self.repo.get_product(payload.id):
            raise AlreadyExists(f"Product {payload.id} already exists")

        for level in payload.inventory:
            if not self.warehouses.get_warehouse(level.warehouse_id):
                raise WarehouseNotFound(level.warehouse_id)

        now = utcnow()
        inventory = [
            {**level.model_dump(), "last_updated": now.isoformat()} for level in payload.inventory
        ]
        product = ProductModel(
            id=payload.id,
            category=payload.category,
            status=stock_status(inventory).value,
            data={
                **payload.model_dump(mode="json", exclude={"id", "category", "inventory"}),
                "inventory": inventory,
            },
            created_at=now,
            updated_at=now,
        )
        created = self.repo.create_product(product)

        logger.info(f"Product {created.id} created in {created.category}, status {created.status}")
        return product_to_read(created)

    def update_inventory(
        self,
        product_id: str,
        warehouse_id: str,
        quantity: int,
        minimum_stock: int | None = None,
    ) -> ProductRead:
        """Ustawia stan produktu w magazynie i przelicza status (wycofany produkt zostaje wycofany)."""
        if quantity < 0:
            raise InvalidInput(f"Quantity must not be negative, got {quantity}")

        product = self._require(product_id)
        if not self.warehouses.get_warehouse(warehouse_id):
            raise WarehouseNotFound(warehouse_id)

        now = utcnow()
        inventory = [dict(entry) for entry in (product.data or {}).get("inventory", [])]
        entry = next((e for e in inventory if e["warehouse_id"] == warehouse_id), None)
        if entry is None:
            entry = {"warehouse_id": warehouse_id, "quantity": 0, "minimum_stock": 0}
            inventory.append(entry)

        entry["quantity"] = quantity
        if minimum_stock is not None:
            entry["minimum_stock"] = minimum_stock
        entry["last_updated"] = now.isoformat()

        try:
            # nowy dict, żeby SQLAlchemy zauważył zmianę kolumny JSON
            product.data = {**product.data, "inventory": inventory}
            if product.status != ProductStatus.DISCONTINUED.value:
                product.status = stock_status(inventory).value
            product.updated_at = now
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Inventory of {product_id} in {warehouse_id} set to {quantity}")
        return product_to_read(self.repo.refresh(product))

    def discontinue_product(self, product_id: str) -> ProductRead:
        product = self._require(product_id)

        try:
            product.status = ProductStatus.DISCONTINUED.value
            product.updated_at = utcnow()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product_id} discontinued")
        return product_to_read(self.repo.refresh(product))

    def _require(self, product_id: str) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product
