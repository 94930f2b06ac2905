"""SQLModel definitions for account and card transactions."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .account import Account
    from .card import Card
    from .invoice import Invoice

TRANSACTION_TYPES = ("expense", "income", "transfer", "withdrawal", "deposit")
FINANCE_TYPES = ("upfront", "installment", "subscription")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(SQLModel, table=True):
    """A single money movement on an account or a card."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    amount: int = Field(nullable=False, description="Minor units; negative for outflow")
    description: str = Field(nullable=False, max_length=255)
    type: str = Field(default="expense", nullable=False, max_length=16)
    category: Optional[str] = Field(default=None, max_length=64)
    finance_type: str = Field(default="upfront", nullable=False, max_length=16)
    installments: int = Field(default=1, nullable=False)
    current_installment: int = Field(default=1, nullable=False)
    installment_group: Optional[str] = Field(default=None, index=True, max_length=32)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    account: "Account | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Account", back_populates="transactions"),
    )

    card_id: Optional[int] = Field(default=None, foreign_key="card.id", index=True)
    card: "Card | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Card", back_populates="transactions"),
    )

    invoice_id: Optional[int] = Field(default=None, foreign_key="invoice.id", index=True)
    invoice: "Invoice | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Invoice", back_populates="transactions"),
    )
