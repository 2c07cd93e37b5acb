# backoffice/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import CustomerNotFound, NotFoundError, ProductNotFound
from backoffice.domain.schemas import OrderAssignment, OrderCreate, OrderOut, OrderStatusUpdate
from backoffice.domain.statuses import OrderStatus
from backoffice.services.employee_service import EmployeeService
from backoffice.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    """
    Tworzy zamówienie (subtotal, podatek 10%, total) razem z fulfillment.
    """
    svc = get_service(db)
    try:
        return svc.create_order(payload)
    except (CustomerNotFound, ProductNotFound) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[OrderOut])
def list_orders(status: Optional[OrderStatus] = None, db: Session = Depends(get_db)):
    return get_service(db).list_orders(status)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: str, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_order_status(order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/assignee", response_model=OrderOut)
def assign_order(order_id: str, payload: OrderAssignment, db: Session = Depends(get_db)):
    """
    Przypisuje zamówienie do pracownika (employee_id=null odpina).
    """
    try:
        return EmployeeService(db).assign_order(order_id, payload.employee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
