"""Celery task tests (eager mode)."""

from datetime import timedelta

from backoffice.celery_worker import celery_app
from backoffice.services import notification_service
from backoffice.services.transport_service import TransportService
from backoffice.tasks import expire
from backoffice.utils.clock import utcnow


def test_beat_schedule_registers_expiry():
    entry = celery_app.conf.beat_schedule["expire-transport-quotes"]
    assert entry["task"] == "backoffice.tasks.expire.expire_quotes_task"


def test_expire_quotes_task(monkeypatch, session_factory, distance, db, order):
    past = utcnow() - timedelta(hours=30)
    stale = TransportService(db, distance_provider=distance, clock=lambda: past).generate_quote(
        order.id, "Old Freight"
    )
    monkeypatch.setattr(expire, "SessionLocal", session_factory)

    assert expire.expire_quotes_task.delay().get() == 1

    db.expire_all()
    assert TransportService(db, distance_provider=distance).get_quote(stale.id).status.value == "expired"


def test_expire_quotes_task_nothing_to_do(monkeypatch, session_factory):
    monkeypatch.setattr(expire, "SessionLocal", session_factory)

    assert expire.expire_quotes_task.apply().get() == 0


def test_notification_tasks():
    result = notification_service.send_quote_accepted_task.apply(args=("ord_1", "tq_1", "FastTrack Logistics"))
    assert result.get() == {"order_id": "ord_1", "quote_id": "tq_1", "status": "sent"}

    result = notification_service.send_payment_confirmed_task.apply(args=("ord_1", "pay_1"))
    assert result.get()["payment_id"] == "pay_1"
