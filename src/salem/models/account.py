"""Bank account model; balances are integer minor units."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction
    from .user import User

ACCOUNT_TYPES = ("corrente", "poupanca", "carteira", "corretora")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(SQLModel, table=True):
    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    type: str = Field(default="corrente", nullable=False, max_length=16)
    balance: int = Field(default=0, nullable=False, description="Minor units (cents)")
    currency: str = Field(default="BRL", max_length=3, description="ISO-4217 currency code")
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    transactions: list["Transaction"] = Relationship(
        back_populates="account",
        sa_relationship=relationship("Transaction", back_populates="account"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="accounts"))
