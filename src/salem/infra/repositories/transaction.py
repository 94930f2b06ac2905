"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlmodel import select

from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def _ordered(self, statement):
        return statement.order_by(
            Transaction.occurred_on.desc(),  # type: ignore
            Transaction.created_at.desc(),  # type: ignore
            Transaction.id.desc(),  # type: ignore
        )

    def filter_by_account(self, account_id: int, *, user_id: int) -> list[Transaction]:
        """Get all transactions for a specific account."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.account_id == account_id)
            )
            rows = list(session.exec(self._ordered(statement)).all())
            session.expunge_all()
            return rows

    def filter_by_card(self, card_id: int, *, user_id: int) -> list[Transaction]:
        """Get all transactions billed to a specific card."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.card_id == card_id)
            )
            rows = list(session.exec(self._ordered(statement)).all())
            session.expunge_all()
            return rows

    def filter_by_cards(
        self,
        card_ids: Iterable[int] | None = None,
        *,
        user_id: int,
        finance_type: Optional[str] = None,
    ) -> list[Transaction]:
        """Card transactions across all cards, or only the given ones."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.card_id.is_not(None))  # type: ignore
            )
            wanted = list(card_ids or [])
            if wanted:
                statement = statement.where(Transaction.card_id.in_(wanted))  # type: ignore
            if finance_type:
                statement = statement.where(Transaction.finance_type == finance_type)
            rows = list(session.exec(self._ordered(statement)).all())
            session.expunge_all()
            return rows

    def filter_by_invoices(self, invoice_ids: Iterable[int], *, user_id: int) -> list[Transaction]:
        """Transactions assigned to any of the given invoices."""
        wanted = list(invoice_ids)
        if not wanted:
            return []
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.invoice_id.in_(wanted))  # type: ignore
            )
            rows = list(session.exec(self._ordered(statement)).all())
            session.expunge_all()
            return rows

    def filter_by_date_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[Transaction]:
        """Get transactions within an inclusive date range."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.occurred_on >= start_date)
                .where(Transaction.occurred_on <= end_date)
            )
            rows = list(session.exec(self._ordered(statement)).all())
            session.expunge_all()
            return rows
