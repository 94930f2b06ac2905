"""Card form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ...errors import ValidationError
from ...models.transaction import FINANCE_TYPES
from ...services.card_billing import CardPurchaseCommand
from .. import fields

CARD_TRANSACTION_TYPES = ("expense", "income")
MAX_INSTALLMENTS = 60

# (attribute, accepted request keys)
_CARD_FIELDS = (
    ("alias", ("alias",)),
    ("brand", ("brand",)),
    ("total_limit", ("total_limit", "totalLimit")),
    ("closing_day", ("closing_day", "closingDay")),
    ("due_day", ("due_day", "dueDay")),
)


@dataclass(slots=True)
class CardForm:
    """Card create/update payload; ``partial`` forms only check submitted fields."""

    partial: bool = False
    alias: Optional[str] = None
    brand: Optional[str] = None
    total_limit: Optional[int] = None
    closing_day: Optional[int] = None
    due_day: Optional[int] = None
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> CardForm:
        form = cls(partial=partial)
        for attribute, keys in _CARD_FIELDS:
            if any(key in data for key in keys):
                form.raw_data[attribute] = fields.pick(data, *keys)
        return form

    def _wants(self, key: str) -> bool:
        return not self.partial or key in self.raw_data

    def validate(self) -> bool:
        self.errors.clear()
        data = self.raw_data
        if self._wants("alias"):
            self.alias = fields.text(self.errors, "alias", data.get("alias"), label="Alias", max_length=50)
        if self._wants("brand"):
            self.brand = fields.text(self.errors, "brand", data.get("brand"), label="Brand", max_length=30)
        if self._wants("total_limit"):
            self.total_limit = fields.amount(
                self.errors, "total_limit", data.get("total_limit"), label="Limit"
            )
        if self._wants("closing_day"):
            self.closing_day = fields.integer(
                self.errors, "closing_day", data.get("closing_day"), label="Closing day", minimum=1, maximum=31
            )
        if self._wants("due_day"):
            self.due_day = fields.integer(
                self.errors, "due_day", data.get("due_day"), label="Due day", minimum=1, maximum=31
            )
        return not self.errors

    def changes(self) -> dict[str, Any]:
        if not self.validate():
            raise ValidationError(self.errors)
        values = {attribute: getattr(self, attribute) for attribute, _ in _CARD_FIELDS}
        return {key: value for key, value in values.items() if value is not None}


@dataclass(slots=True)
class CardTransactionForm:
    """A card purchase, optionally split into installments or pinned to an invoice."""

    amount: Optional[int] = None
    description: Optional[str] = None
    occurred_on: Optional[date] = None
    type: Optional[str] = None
    category: Optional[str] = None
    finance_type: Optional[str] = None
    installments: int = 1
    invoice_month: Optional[int] = None
    invoice_year: Optional[int] = None
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CardTransactionForm:
        form = cls()
        form.raw_data = {
            "amount": data.get("amount"),
            "description": data.get("description"),
            "date": data.get("date"),
            "type": data.get("type"),
            "category": data.get("category"),
            "finance_type": fields.pick(data, "finance_type", "financeType"),
            "installments": data.get("installments"),
            "invoice_month": fields.pick(data, "invoice_month", "invoiceMonth"),
            "invoice_year": fields.pick(data, "invoice_year", "invoiceYear"),
        }
        return form

    def validate(self) -> bool:
        self.errors.clear()
        data = self.raw_data
        self.amount = fields.amount(self.errors, "amount", data["amount"])
        self.description = fields.text(
            self.errors, "description", data["description"], label="Description", max_length=255
        )
        self.occurred_on = fields.calendar_day(self.errors, "date", data["date"])
        self.type = fields.choice(
            self.errors, "type", data["type"], label="Type", options=CARD_TRANSACTION_TYPES, default="expense"
        )
        self.finance_type = fields.choice(
            self.errors,
            "finance_type",
            data["finance_type"],
            label="Finance type",
            options=FINANCE_TYPES,
            default="upfront",
        )
        self.category = fields.text(
            self.errors, "category", data["category"], label="Category", max_length=64, required=False
        )

        self.installments = 1
        if not fields.is_blank(data["installments"]):
            parsed = fields.integer(
                self.errors,
                "installments",
                data["installments"],
                label="Installments",
                minimum=1,
                maximum=MAX_INSTALLMENTS,
            )
            self.installments = parsed or 1

        self.invoice_month = self.invoice_year = None
        if not fields.is_blank(data["invoice_month"]):
            self.invoice_month = fields.integer(
                self.errors, "invoice_month", data["invoice_month"], label="Invoice month", minimum=1, maximum=12
            )
        if not fields.is_blank(data["invoice_year"]):
            self.invoice_year = fields.integer(
                self.errors, "invoice_year", data["invoice_year"], label="Invoice year", minimum=2000, maximum=2100
            )
        return not self.errors

    def to_command(self, card_id: int) -> CardPurchaseCommand:
        if not self.validate():
            raise ValidationError(self.errors)
        return CardPurchaseCommand(
            card_id=card_id,
            amount=self.amount,  # type: ignore[arg-type]
            description=self.description,  # type: ignore[arg-type]
            occurred_on=self.occurred_on,  # type: ignore[arg-type]
            type=self.type or "expense",
            category=self.category,
            finance_type=self.finance_type or "upfront",
            installments=self.installments,
            invoice_month=self.invoice_month,
            invoice_year=self.invoice_year,
        )
