from typing import List

from sqlalchemy.orm import Session

from backoffice.data.models.warehouse import WarehouseModel
from backoffice.domain.errors import AlreadyExists, WarehouseNotFound
from backoffice.domain.schemas import WarehouseCreate, WarehouseRead
from backoffice.repos.warehouse_repo import WarehouseRepo
from backoffice.utils.clock import ensure_utc


def _to_read(warehouse: WarehouseModel) -> WarehouseRead:
    return WarehouseRead(id=warehouse.id, created_at=ensure_utc(warehouse.created_at), **warehouse.data)


class WarehouseService:
    def __init__(self, db: Session):
        self.repo = WarehouseRepo(db)

    def create_warehouse(self, payload: WarehouseCreate) -> WarehouseRead:
        existing = self.repo.get_warehouse(payload.id)
        if existing:
            raise AlreadyExists(f"Warehouse {payload.id} already exists")

        warehouse = WarehouseModel(id=payload.id, data=payload.model_dump(exclude={"id"}))
        return _to_read(self.repo.create_warehouse(warehouse))

    def get_warehouse(self, warehouse_id: str) -> WarehouseRead:
        warehouse = self.repo.get_warehouse(warehouse_id)
        if not warehouse:
            raise WarehouseNotFound(warehouse_id)
        return _to_read(warehouse)

    def list_warehouses(self) -> List[WarehouseRead]:
        return [_to_read(w) for w in self.repo.list_warehouses()]
