# backoffice/services/notification_service.py
from backoffice.celery_worker import celery_app
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_quote_accepted(order_id: str, quote_id: str, carrier: str):
        send_quote_accepted_task.delay(order_id, quote_id, carrier)

    @staticmethod
    def send_payment_confirmed(order_id: str, payment_id: str):
        send_payment_confirmed_task.delay(order_id, payment_id)


@celery_app.task(name="backoffice.services.notification_service.send_quote_accepted_task")
def send_quote_accepted_task(order_id: str, quote_id: str, carrier: str):
    logger.info(f"[NOTIFICATION] Order {order_id}: transport quote {quote_id} accepted, carrier {carrier}")
    return {"order_id": order_id, "quote_id": quote_id, "status": "sent"}


@celery_app.task(name="backoffice.services.notification_service.send_payment_confirmed_task")
def send_payment_confirmed_task(order_id: str, payment_id: str):
    logger.info(f"[NOTIFICATION] Order {order_id}: payment {payment_id} confirmed")
    return {"order_id": order_id, "payment_id": payment_id, "status": "sent"}
