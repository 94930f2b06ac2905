"""Credit card model with its billing cycle configuration."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .invoice import Invoice
    from .transaction import Transaction
    from .user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Card(SQLModel, table=True):
    """A credit card; ``closing_day`` and ``due_day`` drive invoice allocation."""

    __tablename__: ClassVar[str] = "card"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    alias: str = Field(nullable=False, max_length=50)
    brand: str = Field(nullable=False, max_length=30)
    total_limit: int = Field(nullable=False, description="Minor units (cents)")
    closing_day: int = Field(nullable=False, ge=1, le=31)
    due_day: int = Field(nullable=False, ge=1, le=31)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    invoices: list["Invoice"] = Relationship(
        back_populates="card",
        sa_relationship=relationship(
            "Invoice", back_populates="card", cascade="all, delete-orphan"
        ),
    )
    transactions: list["Transaction"] = Relationship(
        back_populates="card",
        sa_relationship=relationship("Transaction", back_populates="card"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="cards"))
