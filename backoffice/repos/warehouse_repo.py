from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.data.models.warehouse import WarehouseModel


class WarehouseRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_warehouse(self, warehouse_id: str) -> WarehouseModel | None:
        return self.db.get(WarehouseModel, warehouse_id)

    def list_warehouses(self) -> list[WarehouseModel]:
        stmt = select(WarehouseModel).order_by(WarehouseModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def create_warehouse(self, warehouse: WarehouseModel) -> WarehouseModel:
        self.db.add(warehouse)
        self.db.commit()
        self.db.refresh(warehouse)
        return warehouse
