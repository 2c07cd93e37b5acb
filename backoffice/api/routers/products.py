# backoffice/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import AlreadyExists, NotFoundError
from backoffice.domain.schemas import InventoryUpdate, ProductCreate, ProductRead
from backoffice.domain.statuses import ProductStatus
from backoffice.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.post("/", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_product(payload)
    except AlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[ProductRead])
def list_products(
    category: Optional[str] = None,
    status: Optional[ProductStatus] = None,
    db: Session = Depends(get_db),
):
    return get_service(db).list_products(category, status)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{product_id}/inventory/{warehouse_id}", response_model=ProductRead)
def update_inventory(
    product_id: str,
    warehouse_id: str,
    payload: InventoryUpdate,
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).update_inventory(
            product_id,
            warehouse_id,
            quantity=payload.quantity,
            minimum_stock=payload.minimum_stock,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{product_id}/discontinue", response_model=ProductRead)
def discontinue_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).discontinue_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
