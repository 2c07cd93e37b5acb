# backoffice/api/routers/payments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import NotFoundError
from backoffice.domain.schemas import PaymentOut
from backoffice.services.notification_service import NotificationService
from backoffice.services.payment_service import PaymentService
from backoffice.utils.settings import RECEIPT_DIR

router = APIRouter(prefix="/api/payments", tags=["payments"])


def get_service(db: Session):
    return PaymentService(db, receipt_dir=RECEIPT_DIR)


@router.get("/", response_model=List[PaymentOut])
def list_payments(order_id: str = Query(...), db: Session = Depends(get_db)):
    try:
        return get_service(db).list_payments(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/confirm", response_model=PaymentOut)
def confirm_payment(
    receipt: UploadFile = File(...),
    fulfillmentId: str = Form(...),
    paymentMethod: str = Form(...),
    userId: str = Form(...),
    note: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    """
    Potwierdzenie płatności z paragonem (multipart/form-data).
    """
    content = receipt.file.read()

    svc = get_service(db)
    try:
        payment = svc.confirm_payment(
            fulfillment_id=fulfillmentId,
            method=paymentMethod,
            user_id=userId,
            filename=receipt.filename,
            content=content,
            note=note,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    NotificationService.send_payment_confirmed(payment.order_id, payment.id)
    return payment
