# backoffice/repos/quote_repo.py
from datetime import datetime

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session, aliased

from backoffice.data.models.transport_quote import TransportQuoteModel
from backoffice.domain.statuses import QuoteStatus


class QuoteRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_quote(self, quote: TransportQuoteModel) -> TransportQuoteModel:
        self.db.add(quote)
        self.db.commit()
        self.db.refresh(quote)
        return quote

    def get_quote(self, quote_id: str) -> TransportQuoteModel | None:
        return self.db.get(TransportQuoteModel, quote_id)

    def list_for_order(
        self,
        order_id: str,
        active_only: bool = False,
        now: datetime | None = None,
    ) -> list[TransportQuoteModel]:
        stmt = (
            select(TransportQuoteModel)
            .where(TransportQuoteModel.order_id == order_id)
            .order_by(TransportQuoteModel.created_at)
        )
        if active_only:
            stmt = stmt.where(
                TransportQuoteModel.status == QuoteStatus.PENDING.value,
                TransportQuoteModel.valid_until >= now,
            )
        return list(self.db.execute(stmt).scalars().all())

    def has_accepted(self, order_id: str) -> bool:
        stmt = select(TransportQuoteModel.id).where(
            TransportQuoteModel.order_id == order_id,
            TransportQuoteModel.status == QuoteStatus.ACCEPTED.value,
        )
        return self.db.execute(stmt.limit(1)).first() is not None

    def accept_for_order(self, quote_id: str, order_id: str, now: datetime) -> int:
        """
        Jedno warunkowe UPDATE: wybrana oferta -> accepted, pozostałe
        oczekujące oferty zamówienia -> rejected.

        Działa tylko dopóki wybrana oferta jest nadal pending i zamówienie
        nie ma jeszcze zaakceptowanej oferty, więc z dwóch akceptacji
        (równoległych albo rozłożonych w czasie) wygrywa jedna, druga
        zmienia 0 wierszy.
        """
        chosen = aliased(TransportQuoteModel)
        chosen_pending = (
            select(chosen.id)
            .where(
                chosen.id == quote_id,
                chosen.order_id == order_id,
                chosen.status == QuoteStatus.PENDING.value,
            )
            .exists()
        )

        sibling = aliased(TransportQuoteModel)
        accepted_sibling = (
            select(sibling.id)
            .where(
                sibling.order_id == order_id,
                sibling.status == QuoteStatus.ACCEPTED.value,
            )
            .exists()
        )

        result = self.db.execute(
            update(TransportQuoteModel)
            .where(
                TransportQuoteModel.order_id == order_id,
                TransportQuoteModel.status == QuoteStatus.PENDING.value,
                chosen_pending,
                ~accepted_sibling,
            )
            .values(
                status=case(
                    (TransportQuoteModel.id == quote_id, QuoteStatus.ACCEPTED.value),
                    else_=QuoteStatus.REJECTED.value,
                ),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def expire_stale(self, now: datetime) -> int:
        result = self.db.execute(
            update(TransportQuoteModel)
            .where(
                TransportQuoteModel.status == QuoteStatus.PENDING.value,
                TransportQuoteModel.valid_until < now,
            )
            .values(status=QuoteStatus.EXPIRED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def refresh(self, quote: TransportQuoteModel) -> TransportQuoteModel:
        self.db.refresh(quote)
        return quote

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
