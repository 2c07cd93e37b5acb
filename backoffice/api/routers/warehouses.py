# backoffice/api/routers/warehouses.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import WarehouseNotFound
from backoffice.domain.schemas import WarehouseCreate, WarehouseRead
from backoffice.services.warehouse_service import WarehouseService

router = APIRouter(prefix="/warehouses", tags=["warehouses"])


@router.post("/", response_model=WarehouseRead, status_code=201)
def create_warehouse(payload: WarehouseCreate, db: Session = Depends(get_db)):
    try:
        return WarehouseService(db).create_warehouse(payload)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/", response_model=List[WarehouseRead])
def list_warehouses(db: Session = Depends(get_db)):
    return WarehouseService(db).list_warehouses()


@router.get("/{warehouse_id}", response_model=WarehouseRead)
def get_warehouse(warehouse_id: str, db: Session = Depends(get_db)):
    try:
        return WarehouseService(db).get_warehouse(warehouse_id)
    except WarehouseNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
