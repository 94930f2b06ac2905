"""Invoice repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.invoice import Invoice


class InvoiceRepository(Protocol):
    """Read access to card invoices; mutations go through the allocator."""

    def get_by_id(self, invoice_id: int, *, user_id: int) -> Optional[Invoice]:
        ...

    def list_all(self, *, user_id: int) -> list[Invoice]:
        ...

    def list_open(self, *, user_id: int) -> list[Invoice]:
        """Invoices flagged open that still have an outstanding balance."""
        ...

    def list_by_card(self, card_id: int, *, user_id: int) -> list[Invoice]:
        ...

    def list_for_period(
        self,
        year: int,
        month: int,
        *,
        user_id: int,
        card_ids: Iterable[int] | None = None,
    ) -> list[Invoice]:
        ...
