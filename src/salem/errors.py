"""Exception hierarchy shared by services and routes."""

from __future__ import annotations

from typing import Mapping, Sequence


class SalemError(Exception):
    """Base exception for all Salem errors."""


class RecordNotFoundError(SalemError, LookupError):
    """Raised when a record is missing or owned by another user."""

    def __init__(self, entity: str, record_id: object) -> None:
        super().__init__(f"{entity} {record_id} was not found")
        self.entity = entity
        self.record_id = record_id


class ValidationError(SalemError, ValueError):
    """Raised when submitted data fails validation."""

    def __init__(self, fields: Mapping[str, Sequence[str]]) -> None:
        self.fields = {key: list(messages) for key, messages in fields.items()}
        summary = ", ".join(
            f"{key}: {message}" for key, messages in self.fields.items() for message in messages
        )
        super().__init__(f"Invalid data: {summary}" if summary else "Invalid data")


class MoneyParseError(SalemError, ValueError):
    """Raised by the strict money parser when input is not a number."""

    def __init__(self, text: object) -> None:
        super().__init__(f"Cannot parse monetary amount from {text!r}")
        self.text = text
