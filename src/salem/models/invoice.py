"""Monthly credit card invoice."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .card import Card
    from .transaction import Transaction

INVOICE_STATUSES = ("open", "paid", "overdue")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Invoice(SQLModel, table=True):
    """One billing cycle of a card, keyed by ``(card_id, year, month)``."""

    __tablename__: ClassVar[str] = "invoice"
    __table_args__ = (UniqueConstraint("card_id", "year", "month", name="uq_invoice_period"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    card_id: int = Field(foreign_key="card.id", nullable=False, index=True)
    month: int = Field(nullable=False, ge=1, le=12)
    year: int = Field(nullable=False)
    total_amount: int = Field(default=0, nullable=False, description="Minor units (cents)")
    paid_amount: int = Field(default=0, nullable=False, description="Minor units (cents)")
    status: str = Field(default="open", nullable=False, max_length=16)
    closing_date: date = Field(nullable=False)
    due_date: date = Field(nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    card: "Card" = Relationship(
        back_populates="invoices",
        sa_relationship=relationship("Card", back_populates="invoices"),
    )
    transactions: list["Transaction"] = Relationship(
        back_populates="invoice",
        sa_relationship=relationship("Transaction", back_populates="invoice"),
    )
