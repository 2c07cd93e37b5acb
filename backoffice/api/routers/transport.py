# backoffice/api/routers/transport.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from requests import RequestException
from sqlalchemy.orm import Session

from backoffice.data.database import get_db
from backoffice.domain.errors import NotFoundError, QuoteConflict
from backoffice.domain.schemas import AcceptanceOut, QuoteRequest, TransportQuoteOut
from backoffice.providers import DistanceProvider, get_distance_provider
from backoffice.providers.geocoding import GeocodingError
from backoffice.services.notification_service import NotificationService
from backoffice.services.transport_service import TransportService
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/orders/{order_id}/quotes", tags=["transport"])


def get_distance() -> DistanceProvider:
    return get_distance_provider()


def get_service(db: Session, distance_provider: DistanceProvider):
    return TransportService(db, distance_provider=distance_provider)


@router.post("/", response_model=TransportQuoteOut, status_code=201)
def generate_quote(
    order_id: str,
    payload: QuoteRequest,
    db: Session = Depends(get_db),
    distance_provider: DistanceProvider = Depends(get_distance),
):
    svc = get_service(db, distance_provider)
    try:
        return svc.generate_quote(order_id, payload.provider, payload.method)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QuoteConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (GeocodingError, RequestException) as e:
        logger.error(f"Distance lookup failed for order {order_id}: {e}")
        raise HTTPException(status_code=502, detail="Distance lookup failed")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[TransportQuoteOut])
def list_quotes(
    order_id: str,
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    distance_provider: DistanceProvider = Depends(get_distance),
):
    svc = get_service(db, distance_provider)
    try:
        return svc.list_quotes(order_id, active_only=active_only)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{quote_id}/accept", response_model=AcceptanceOut)
def accept_quote(
    order_id: str,
    quote_id: str,
    db: Session = Depends(get_db),
    distance_provider: DistanceProvider = Depends(get_distance),
):
    """
    Akceptuje ofertę. Powiadomienie idzie dopiero po commicie transakcji.
    """
    svc = get_service(db, distance_provider)
    try:
        result = svc.accept_quote(quote_id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QuoteConflict as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not result.already_accepted:
        NotificationService.send_quote_accepted(order_id, quote_id, result.quote.provider)
    return result
