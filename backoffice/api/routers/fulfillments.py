# backoffice/api/routers/fulfillments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import NotFoundError
from backoffice.domain.schemas import FulfillmentOut, FulfillmentStatusUpdate, TrackingUpdate
from backoffice.domain.statuses import FulfillmentStatus
from backoffice.services.fulfillment_service import FulfillmentService

router = APIRouter(prefix="/fulfillments", tags=["fulfillments"])


def get_service(db: Session):
    return FulfillmentService(db)


@router.get("/", response_model=List[FulfillmentOut])
def list_fulfillments(status: Optional[FulfillmentStatus] = None, db: Session = Depends(get_db)):
    return get_service(db).list_fulfillments(status)


@router.get("/{order_id}", response_model=FulfillmentOut)
def get_fulfillment(order_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_fulfillment(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/status", response_model=FulfillmentOut)
def update_status(order_id: str, payload: FulfillmentStatusUpdate, db: Session = Depends(get_db)):
    try:
        return get_service(db).update_status(order_id, payload.status, payload.note)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{order_id}/tracking", response_model=FulfillmentOut)
def add_tracking(order_id: str, payload: TrackingUpdate, db: Session = Depends(get_db)):
    try:
        return get_service(db).add_tracking(
            order_id,
            carrier=payload.carrier,
            tracking_number=payload.tracking_number,
            estimated_delivery=payload.estimated_delivery,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{order_id}/ship", response_model=FulfillmentOut)
def mark_shipped(order_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).mark_shipped(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{order_id}/deliver", response_model=FulfillmentOut)
def mark_delivered(order_id: str, db: Session = Depends(get_db)):
    try:
        return get_service(db).mark_delivered(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
