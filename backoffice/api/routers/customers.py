# backoffice/api/routers/customers.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import NotFoundError
from backoffice.domain.schemas import CustomerCreate, CustomerRead
from backoffice.services.customer_service import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("/", response_model=CustomerRead, status_code=201)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db)):
    return CustomerService(db).create_customer(payload)


@router.get("/", response_model=List[CustomerRead])
def list_customers(db: Session = Depends(get_db)):
    return CustomerService(db).list_customers()


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: str, db: Session = Depends(get_db)):
    try:
        return CustomerService(db).get_customer(customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
