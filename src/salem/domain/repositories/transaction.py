"""Transaction repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Read access to transactions; writes go through the allocator."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def filter_by_account(self, account_id: int, *, user_id: int) -> list[Transaction]:
        """Get all transactions for a specific account."""
        ...

    def filter_by_card(self, card_id: int, *, user_id: int) -> list[Transaction]:
        """Get all transactions billed to a card."""
        ...

    def filter_by_cards(
        self,
        card_ids: Iterable[int] | None = None,
        *,
        user_id: int,
        finance_type: Optional[str] = None,
    ) -> list[Transaction]:
        ...

    def filter_by_invoices(self, invoice_ids: Iterable[int], *, user_id: int) -> list[Transaction]:
        ...

    def filter_by_date_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[Transaction]:
        """Get transactions within a date range."""
        ...
