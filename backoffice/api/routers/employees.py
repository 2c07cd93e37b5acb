# backoffice/api/routers/employees.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import AlreadyExists, NotFoundError
from backoffice.domain.schemas import CommissionOut, CommissionSummary, EmployeeCreate, EmployeeRead
from backoffice.domain.statuses import EmployeeStatus
from backoffice.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


def get_service(db: Session):
    return EmployeeService(db)


@router.post("/", response_model=EmployeeRead, status_code=201)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_employee(payload)
    except AlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/", response_model=List[EmployeeRead])
def list_employees(status: Optional[EmployeeStatus] = None, db: Session = Depends(get_db)):
    return get_service(db).list_employees(status)


@router.get("/{employee_id}", response_model=EmployeeRead)
def get_employee(employee_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_employee(employee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{employee_id}/deactivate", response_model=EmployeeRead)
def deactivate_employee(employee_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).deactivate_employee(employee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{employee_id}/commissions", response_model=CommissionSummary)
def list_commissions(employee_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).list_commissions(employee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{employee_id}/commissions/{order_id}", response_model=CommissionOut)
def commission_for_order(employee_id: str, order_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).commission_for_order(employee_id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
