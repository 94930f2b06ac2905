"""SQLModel implementation of Invoice repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlmodel import select

from ...models.invoice import Invoice
from ...services.invoice_period import is_invoice_open
from ..database import SessionFactory


class SQLModelInvoiceRepository:
    """SQLModel-based invoice repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, invoice_id: int, *, user_id: int) -> Optional[Invoice]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Invoice).where(Invoice.id == invoice_id).where(Invoice.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Invoice]:
        """List invoices, most recent period first."""
        with self.session_factory() as session:
            statement = (
                select(Invoice)
                .where(Invoice.user_id == user_id)
                .order_by(Invoice.year.desc(), Invoice.month.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_open(self, *, user_id: int) -> list[Invoice]:
        """Invoices still flagged open with an outstanding balance."""
        return [invoice for invoice in self.list_all(user_id=user_id) if is_invoice_open(invoice)]

    def list_by_card(self, card_id: int, *, user_id: int) -> list[Invoice]:
        with self.session_factory() as session:
            statement = (
                select(Invoice)
                .where(Invoice.user_id == user_id)
                .where(Invoice.card_id == card_id)
                .order_by(Invoice.year.desc(), Invoice.month.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_period(
        self,
        year: int,
        month: int,
        *,
        user_id: int,
        card_ids: Iterable[int] | None = None,
    ) -> list[Invoice]:
        """Invoices of every card (or the given cards) for one ``(year, month)``."""
        with self.session_factory() as session:
            statement = (
                select(Invoice)
                .where(Invoice.user_id == user_id)
                .where(Invoice.year == year)
                .where(Invoice.month == month)
            )
            wanted = list(card_ids or [])
            if wanted:
                statement = statement.where(Invoice.card_id.in_(wanted))  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
