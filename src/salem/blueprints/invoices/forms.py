"""Invoice form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...errors import ValidationError
from ...models.invoice import INVOICE_STATUSES
from ...services.allocator import InvoiceUpdateCommand
from .. import fields

INVOICE_ACTIONS = ("mark_paid", "reopen")


@dataclass(slots=True)
class InvoiceUpdateForm:
    """Direct field edits of an invoice; every field is optional."""

    raw_data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> InvoiceUpdateForm:
        raw = {
            "total_amount": fields.pick(data, "total_amount", "totalAmount"),
            "paid_amount": fields.pick(data, "paid_amount", "paidAmount"),
            "due_date": fields.pick(data, "due_date", "dueDate"),
            "closing_date": fields.pick(data, "closing_date", "closingDate"),
            "status": data.get("status"),
        }
        return cls(raw_data={key: value for key, value in raw.items() if value is not None})

    def to_command(self) -> InvoiceUpdateCommand:
        self.errors.clear()
        data = self.raw_data
        values: dict[str, Any] = {}
        for key, label in (("total_amount", "Total amount"), ("paid_amount", "Paid amount")):
            if key in data:
                values[key] = fields.amount(self.errors, key, data[key], label=label)
        for key, label in (("due_date", "Due date"), ("closing_date", "Closing date")):
            if key in data:
                values[key] = fields.calendar_day(self.errors, key, data[key], label=label)
        if "status" in data:
            values["status"] = fields.choice(
                self.errors, "status", data["status"], label="Status", options=INVOICE_STATUSES
            )
        if self.errors:
            raise ValidationError(self.errors)
        return InvoiceUpdateCommand(**values)


def parse_action(data: Mapping[str, Any]) -> str:
    errors: dict[str, list[str]] = {}
    action = fields.choice(errors, "action", data.get("action"), label="Action", options=INVOICE_ACTIONS)
    if errors:
        raise ValidationError(errors)
    return action  # type: ignore[return-value]
