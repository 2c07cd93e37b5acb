# backoffice/tasks/expire.py
from backoffice.celery_worker import celery_app
from backoffice.data.database import SessionLocal
from backoffice.services.transport_service import TransportService
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="backoffice.tasks.expire.expire_quotes_task")
def expire_quotes_task():
    """Oferty pending po terminie ważności -> expired."""
    logger.info("Expire transport quotes task started")

    db = SessionLocal()
    try:
        service = TransportService(db)
        count = service.expire_stale_quotes()
        logger.info(f"Expire transport quotes task finished, {count} quotes expired")
        return count
    finally:
        db.close()
