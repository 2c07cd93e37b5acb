# backoffice/celery_worker.py
from celery import Celery

from backoffice.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, QUOTE_EXPIRY_INTERVAL

celery_app = Celery(
    "backoffice",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "backoffice.tasks.expire",
    "backoffice.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "expire-transport-quotes": {
        "task": "backoffice.tasks.expire.expire_quotes_task",
        "schedule": QUOTE_EXPIRY_INTERVAL,
    },
}

celery_app.conf.timezone = "UTC"
