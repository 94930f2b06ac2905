"""Card repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.card import Card


class CardRepository(Protocol):
    """Repository for managing credit cards."""

    def get_by_id(self, card_id: int, *, user_id: int) -> Optional[Card]:
        ...

    def list_all(self, *, user_id: int) -> list[Card]:
        ...

    def create(self, card: Card, *, user_id: int) -> Card:
        ...

    def update(self, card_id: int, changes: dict, *, user_id: int) -> Optional[Card]:
        ...

    def delete(self, card_id: int, *, user_id: int) -> bool:
        ...
