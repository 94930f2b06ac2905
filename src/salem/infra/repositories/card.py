"""SQLModel implementation of Card repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import select

from ...models.card import Card
from ..database import SessionFactory


class SQLModelCardRepository:
    """SQLModel-based card repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, card_id: int, *, user_id: int) -> Optional[Card]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Card).where(Card.id == card_id).where(Card.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Card]:
        with self.session_factory() as session:
            statement = (
                select(Card)
                .where(Card.user_id == user_id)
                .order_by(Card.created_at.desc(), Card.id.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, card: Card, *, user_id: int) -> Card:
        with self.session_factory() as session:
            card.user_id = user_id
            session.add(card)
            session.commit()
            session.refresh(card)
            session.expunge(card)
            return card

    def update(self, card_id: int, changes: dict, *, user_id: int) -> Optional[Card]:
        """Apply ``changes`` to a card; returns None when not found."""
        with self.session_factory() as session:
            card = session.exec(
                select(Card).where(Card.id == card_id).where(Card.user_id == user_id)
            ).first()
            if card is None:
                return None
            for key, value in changes.items():
                setattr(card, key, value)
            card.updated_at = datetime.now(timezone.utc)
            session.add(card)
            session.commit()
            session.refresh(card)
            session.expunge(card)
            return card

    def delete(self, card_id: int, *, user_id: int) -> bool:
        """Delete a card together with its invoices."""
        with self.session_factory() as session:
            card = session.exec(
                select(Card).where(Card.id == card_id).where(Card.user_id == user_id)
            ).first()
            if card is None:
                return False
            session.delete(card)
            session.commit()
            return True
