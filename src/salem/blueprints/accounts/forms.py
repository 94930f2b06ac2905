"""Account form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ...errors import ValidationError
from ...models.account import ACCOUNT_TYPES
from ...services.allocator import AccountTransactionCommand
from .. import fields

ACCOUNT_TRANSACTION_TYPES = ("deposit", "withdrawal")


@dataclass(slots=True)
class AccountForm:
    """Account create/update payload prior to validation.

    With ``partial=True`` (updates) only the submitted fields are checked.
    """

    partial: bool = False
    name: Optional[str] = None
    type: Optional[str] = None
    balance: Optional[int] = None
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> AccountForm:
        form = cls(partial=partial)
        form.raw_data = {key: data[key] for key in ("name", "type", "balance") if key in data}
        return form

    def _wants(self, key: str) -> bool:
        return not self.partial or key in self.raw_data

    def validate(self) -> bool:
        self.errors.clear()
        if self._wants("name"):
            self.name = fields.text(
                self.errors, "name", self.raw_data.get("name"), label="Name", max_length=100
            )
        if self._wants("type"):
            self.type = fields.choice(
                self.errors,
                "type",
                self.raw_data.get("type"),
                label="Account type",
                options=ACCOUNT_TYPES,
            )
        if "balance" in self.raw_data and not fields.is_blank(self.raw_data["balance"]):
            self.balance = fields.amount(
                self.errors, "balance", self.raw_data["balance"], label="Balance", allow_zero=True
            )
        elif not self.partial:
            self.balance = 0
        return not self.errors

    def changes(self) -> dict[str, Any]:
        """Validated values to write; raises ``ValidationError`` when invalid."""

        if not self.validate():
            raise ValidationError(self.errors)
        values = {"name": self.name, "type": self.type, "balance": self.balance}
        return {key: value for key, value in values.items() if value is not None}


@dataclass(slots=True)
class AccountTransactionForm:
    """Deposit or withdrawal against an account."""

    amount: Optional[int] = None
    description: Optional[str] = None
    type: Optional[str] = None
    occurred_on: Optional[date] = None
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AccountTransactionForm:
        form = cls()
        form.raw_data = dict(data)
        return form

    def validate(self) -> bool:
        self.errors.clear()
        data = self.raw_data
        self.amount = fields.amount(self.errors, "amount", data.get("amount"))
        self.description = fields.text(
            self.errors, "description", data.get("description"), label="Description", max_length=255
        )
        self.type = fields.choice(
            self.errors,
            "type",
            data.get("type"),
            label="Transaction type",
            options=ACCOUNT_TRANSACTION_TYPES,
        )
        self.occurred_on = fields.calendar_day(self.errors, "date", data.get("date"))
        return not self.errors

    def to_command(self, account_id: int) -> AccountTransactionCommand:
        if not self.validate():
            raise ValidationError(self.errors)
        return AccountTransactionCommand(
            account_id=account_id,
            amount=self.amount,  # type: ignore[arg-type]
            description=self.description,  # type: ignore[arg-type]
            type=self.type,  # type: ignore[arg-type]
            occurred_on=self.occurred_on,  # type: ignore[arg-type]
        )
