"""Login identity; every account, card, invoice and transaction hangs off one."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

USERNAME_MAX_LENGTH = 64


def normalize_username(raw: Optional[str]) -> str:
    return (raw or "").strip()


class User(SQLModel, table=True):
    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=USERNAME_MAX_LENGTH)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_login: Optional[datetime] = Field(default=None)

    accounts = Relationship(
        back_populates="user",
        sa_relationship=relationship("Account", back_populates="user"),
    )
    cards = Relationship(
        back_populates="user",
        sa_relationship=relationship("Card", back_populates="user"),
    )

    def record_login(self, password_hash: Optional[str] = None) -> None:
        """Stamp a successful login, swapping in a rehashed password if given."""
        if password_hash:
            self.password_hash = password_hash
        self.last_login = datetime.now(timezone.utc)
