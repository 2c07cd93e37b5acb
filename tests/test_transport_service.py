"""Tests for transport quote generation and acceptance."""

import threading
from datetime import timedelta
from decimal import Decimal

import pytest

from backoffice.data.models import OrderModel, TransportQuoteModel
from backoffice.domain.errors import (
    AcceptanceFailed,
    MissingShippingAddress,
    OrderNotFound,
    OrderNotQuotable,
    QuoteAlreadyChosen,
    QuoteConflict,
    QuoteExpired,
    QuoteNotFound,
    QuoteNotPending,
    WarehouseNotFound,
)
from backoffice.domain.statuses import FulfillmentStatus, OrderStatus, QuoteStatus
from backoffice.providers import FixedDistanceProvider
from backoffice.repos.quote_repo import QuoteRepo
from backoffice.services.fulfillment_service import FulfillmentService
from backoffice.services.order_service import OrderService
from backoffice.services.transport_service import TransportService
from backoffice.utils.clock import utcnow


@pytest.fixture
def transport(db, distance):
    return TransportService(db, distance_provider=distance)


class TestGenerateQuote:
    def test_quote_fields(self, transport, order):
        quote = transport.generate_quote(order.id, "FastTrack Logistics", "medium-truck")

        assert quote.order_id == order.id
        assert quote.provider == "FastTrack Logistics"
        assert quote.method == "medium-truck"
        assert quote.status == QuoteStatus.PENDING
        assert quote.distance == 250.0
        # 1800 + 2 * 45
        assert quote.total_weight == 1890.0
        assert quote.total_value == Decimal("5000.00")
        assert quote.cost == Decimal("414.00")
        assert quote.estimated_days == 2

    def test_valid_for_24_hours(self, db, distance, order):
        now = utcnow()
        svc = TransportService(db, distance_provider=distance, clock=lambda: now)

        quote = svc.generate_quote(order.id, "FastTrack Logistics")

        assert quote.valid_until == now + timedelta(hours=24)

    def test_insurance_not_included_at_or_below_threshold(self, transport, order):
        quote = transport.generate_quote(order.id, "FastTrack Logistics")

        assert quote.insurance.included is False
        assert quote.insurance.cost == Decimal("5000.00") * Decimal("0.001")

    def test_insurance_included_above_threshold(self, transport, order_factory):
        order = order_factory(items=[{"product_id": "EXC-200", "quantity": 1, "price": "25000.00"}])

        quote = transport.generate_quote(order.id, "Heavy Haulers Co.")

        assert quote.insurance.included is True
        assert quote.insurance.cost == Decimal("0")
        assert quote.insurance.coverage == Decimal("25000.00")

    def test_missing_weight_counts_as_one_kg(self, transport, order_factory, product_factory):
        product_factory("GLV-1", price="10.00", weight=None)
        order = order_factory(items=[{"product_id": "GLV-1", "quantity": 4}])

        quote = transport.generate_quote(order.id, "Reliable Transport")

        assert quote.total_weight == 4.0

    def test_distance_between_warehouse_and_shipping_address(self, db, order):
        seen = []

        class RecordingProvider(FixedDistanceProvider):
            def distance_km(self, origin, destination):
                seen.append((origin, destination))
                return super().distance_km(origin, destination)

        TransportService(db, distance_provider=RecordingProvider(80)).generate_quote(order.id, "Reliable Transport")

        assert seen == [("New York, NY, USA", "500 Industrial Way, Chicago, IL, 60601, USA")]

    def test_missing_shipping_address_writes_nothing(self, db, transport, order_factory):
        order = order_factory(address=None)

        with pytest.raises(MissingShippingAddress):
            transport.generate_quote(order.id, "FastTrack Logistics")

        assert db.query(TransportQuoteModel).filter_by(order_id=order.id).count() == 0

    def test_unknown_warehouse(self, transport, order_factory):
        order = order_factory(items=[{"product_id": "EXC-200", "quantity": 1, "warehouse_id": "WH-404"}])

        with pytest.raises(WarehouseNotFound):
            transport.generate_quote(order.id, "FastTrack Logistics")

    def test_no_warehouse_and_no_default(self, db, distance, order_factory, product_factory):
        product_factory("SOLD-OUT", inventory=())
        order = order_factory(items=[{"product_id": "SOLD-OUT", "quantity": 1}])
        svc = TransportService(db, distance_provider=distance, default_warehouse_id=None)

        with pytest.raises(WarehouseNotFound):
            svc.generate_quote(order.id, "FastTrack Logistics")

    def test_configured_default_warehouse(self, db, distance, order_factory, product_factory):
        product_factory("SOLD-OUT", inventory=())
        order = order_factory(items=[{"product_id": "SOLD-OUT", "quantity": 1}])
        svc = TransportService(db, distance_provider=distance, default_warehouse_id="WH-2")

        quote = svc.generate_quote(order.id, "FastTrack Logistics")

        row = db.get(TransportQuoteModel, quote.id)
        assert row.data["origin_warehouse_id"] == "WH-2"

    def test_unknown_order(self, transport):
        with pytest.raises(OrderNotFound):
            transport.generate_quote("ord_missing", "FastTrack Logistics")

    @pytest.mark.parametrize("status", [OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.DELIVERED])
    def test_closed_order_gets_no_quotes(self, db, transport, order, status):
        OrderService(db).update_order_status(order.id, status)

        with pytest.raises(OrderNotQuotable):
            transport.generate_quote(order.id, "FastTrack Logistics")

        assert db.query(TransportQuoteModel).filter_by(order_id=order.id).count() == 0

    def test_confirmed_order_can_be_quoted(self, db, transport, order):
        OrderService(db).update_order_status(order.id, OrderStatus.CONFIRMED)

        assert transport.generate_quote(order.id, "FastTrack Logistics").status == QuoteStatus.PENDING

    def test_refused_once_a_quote_is_accepted(self, db, transport, order):
        chosen = transport.generate_quote(order.id, "FastTrack Logistics")
        transport.accept_quote(chosen.id, order.id)
        # nawet po ręcznym cofnięciu statusu zamówienia
        OrderService(db).update_order_status(order.id, OrderStatus.PENDING)

        with pytest.raises(QuoteAlreadyChosen):
            transport.generate_quote(order.id, "Heavy Haulers Co.")

        assert [q.id for q in transport.list_quotes(order.id)] == [chosen.id]


    def test_duplicates_allowed(self, transport, order):
        transport.generate_quote(order.id, "FastTrack Logistics")
        transport.generate_quote(order.id, "FastTrack Logistics")

        assert len(transport.list_quotes(order.id)) == 2


class TestListQuotes:
    def test_active_only_skips_expired_and_decided(self, db, distance, order):
        past = utcnow() - timedelta(hours=30)
        stale = TransportService(db, distance_provider=distance, clock=lambda: past)
        stale.generate_quote(order.id, "Old Freight")

        svc = TransportService(db, distance_provider=distance)
        fresh = svc.generate_quote(order.id, "FastTrack Logistics")

        assert len(svc.list_quotes(order.id)) == 2
        assert [q.id for q in svc.list_quotes(order.id, active_only=True)] == [fresh.id]


class TestAcceptQuote:
    def test_accepts_one_and_rejects_siblings(self, transport, order):
        a = transport.generate_quote(order.id, "FastTrack Logistics")
        b = transport.generate_quote(order.id, "Heavy Haulers Co.")

        result = transport.accept_quote(a.id, order.id)

        assert result.quote.status == QuoteStatus.ACCEPTED
        assert transport.get_quote(b.id).status == QuoteStatus.REJECTED
        assert result.order.status == OrderStatus.PROCESSING
        assert result.fulfillment.status == FulfillmentStatus.PROCESSING
        assert result.fulfillment.history[-1].note == "Transport quote accepted"
        assert result.fulfillment.carrier == "FastTrack Logistics"
        assert result.fulfillment.transport_quote_id == a.id
        assert result.already_accepted is False

    def test_appends_to_existing_history(self, transport, order):
        quote = transport.generate_quote(order.id, "FastTrack Logistics")

        result = transport.accept_quote(quote.id, order.id)

        statuses = [h.status.value for h in result.fulfillment.history]
        assert statuses == ["pending", "processing"]

    def test_creates_missing_fulfillment(self, db, transport, order):
        # zamówienia sprzed wprowadzenia fulfillment przy tworzeniu
        db.delete(db.get(OrderModel, order.id).fulfillment)
        db.commit()
        quote = transport.generate_quote(order.id, "FastTrack Logistics")

        result = transport.accept_quote(quote.id, order.id)

        assert result.fulfillment.status == FulfillmentStatus.PROCESSING
        assert len(result.fulfillment.history) == 1
        assert result.fulfillment.history[0].note == "Transport quote accepted"

    def test_second_accept_is_noop(self, transport, order):
        quote = transport.generate_quote(order.id, "FastTrack Logistics")
        transport.accept_quote(quote.id, order.id)

        again = transport.accept_quote(quote.id, order.id)

        assert again.already_accepted is True
        assert again.quote.status == QuoteStatus.ACCEPTED
        notes = [h.note for h in again.fulfillment.history]
        assert notes.count("Transport quote accepted") == 1

    def test_rejected_quote_cannot_be_accepted(self, transport, order):
        a = transport.generate_quote(order.id, "FastTrack Logistics")
        b = transport.generate_quote(order.id, "Heavy Haulers Co.")
        transport.accept_quote(a.id, order.id)

        with pytest.raises(QuoteNotPending):
            transport.accept_quote(b.id, order.id)

        assert transport.get_quote(a.id).status == QuoteStatus.ACCEPTED

    def test_late_quote_cannot_replace_accepted_one(self, db, transport, order):
        a = transport.generate_quote(order.id, "FastTrack Logistics")
        transport.accept_quote(a.id, order.id)
        # oferta zapisana przez równoległą wycenę, zanim akceptacja A została zatwierdzona
        row = db.get(TransportQuoteModel, a.id)
        late = TransportQuoteModel(
            id="tq_late",
            order_id=order.id,
            status=QuoteStatus.PENDING.value,
            valid_until=utcnow() + timedelta(hours=24),
            data={**row.data, "provider": "Heavy Haulers Co."},
            created_at=utcnow(),
            updated_at=utcnow(),
        )
        db.add(late)
        db.commit()

        with pytest.raises(QuoteAlreadyChosen):
            transport.accept_quote("tq_late", order.id)

        statuses = {q.id: q.status for q in transport.list_quotes(order.id)}
        assert statuses == {a.id: QuoteStatus.ACCEPTED, "tq_late": QuoteStatus.PENDING}

    def test_conditional_update_skips_order_with_accepted_quote(self, db, transport, order):
        a = transport.generate_quote(order.id, "FastTrack Logistics")
        b = transport.generate_quote(order.id, "Heavy Haulers Co.")
        transport.accept_quote(a.id, order.id)
        db.query(TransportQuoteModel).filter_by(id=b.id).update({"status": QuoteStatus.PENDING.value})
        db.commit()

        assert QuoteRepo(db).accept_for_order(b.id, order.id, utcnow()) == 0
        db.rollback()

        accepted = db.query(TransportQuoteModel).filter_by(order_id=order.id, status="accepted").all()
        assert [r.id for r in accepted] == [a.id]

    def test_expired_quote(self, db, distance, order):
        past = utcnow() - timedelta(hours=25)
        quote = TransportService(db, distance_provider=distance, clock=lambda: past).generate_quote(
            order.id, "FastTrack Logistics"
        )

        with pytest.raises(QuoteExpired):
            TransportService(db, distance_provider=distance).accept_quote(quote.id, order.id)

        assert OrderService(db).get_order(order.id).status == OrderStatus.PENDING

    def test_quote_of_other_order(self, transport, order_factory):
        first = order_factory()
        second = order_factory()
        quote = transport.generate_quote(first.id, "FastTrack Logistics")

        with pytest.raises(QuoteNotFound):
            transport.accept_quote(quote.id, second.id)

    def test_failure_rolls_back_everything(self, db, transport, order):
        a = transport.generate_quote(order.id, "FastTrack Logistics")
        b = transport.generate_quote(order.id, "Heavy Haulers Co.")
        # cancelled jest terminalny, więc upsert fulfillment się nie uda
        FulfillmentService(db).update_status(order.id, FulfillmentStatus.CANCELLED, "customer withdrew")

        with pytest.raises(AcceptanceFailed) as exc_info:
            transport.accept_quote(a.id, order.id)

        assert exc_info.value.cause is not None
        assert transport.get_quote(a.id).status == QuoteStatus.PENDING
        assert transport.get_quote(b.id).status == QuoteStatus.PENDING
        assert OrderService(db).get_order(order.id).status == OrderStatus.PENDING

    def test_parallel_acceptances_have_one_winner(self, session_factory, distance, order):
        db = session_factory()
        try:
            svc = TransportService(db, distance_provider=distance)
            a = svc.generate_quote(order.id, "FastTrack Logistics")
            b = svc.generate_quote(order.id, "Heavy Haulers Co.")
        finally:
            db.close()

        barrier = threading.Barrier(2)
        outcomes = {}

        def accept(quote_id):
            session = session_factory()
            try:
                worker = TransportService(session, distance_provider=distance)
                barrier.wait()
                outcomes[quote_id] = worker.accept_quote(quote_id, order.id)
            except QuoteConflict as e:
                outcomes[quote_id] = e
            finally:
                session.close()

        threads = [threading.Thread(target=accept, args=(q.id,)) for q in (a, b)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        winners = [qid for qid, res in outcomes.items() if not isinstance(res, Exception)]
        losers = [qid for qid, res in outcomes.items() if isinstance(res, Exception)]
        assert len(winners) == 1
        assert len(losers) == 1

        check = session_factory()
        try:
            rows = check.query(TransportQuoteModel).filter_by(order_id=order.id).all()
            statuses = sorted(r.status for r in rows)
            assert statuses == ["accepted", "rejected"]
            accepted = [r.id for r in rows if r.status == "accepted"]
            assert accepted == winners
        finally:
            check.close()


class TestExpireStaleQuotes:
    def test_marks_only_stale_pending(self, db, distance, order):
        past = utcnow() - timedelta(hours=48)
        stale = TransportService(db, distance_provider=distance, clock=lambda: past).generate_quote(
            order.id, "Old Freight"
        )
        svc = TransportService(db, distance_provider=distance)
        fresh = svc.generate_quote(order.id, "FastTrack Logistics")

        assert svc.expire_stale_quotes() == 1
        assert svc.get_quote(stale.id).status == QuoteStatus.EXPIRED
        assert svc.get_quote(fresh.id).status == QuoteStatus.PENDING
