"""Field parsers shared by the request forms.

Each parser takes the form's ``errors`` mapping, records a message on
failure and returns ``None``; on success it returns the typed value.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from ..services.money import coerce_minor_units, to_minor_units

Errors = dict[str, list[str]]

MAX_AMOUNT = to_minor_units(999_999_999)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z?$")


def add_error(errors: Errors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def pick(data: Mapping[str, Any], *names: str) -> Any:
    """First present key among ``names`` (snake_case and camelCase spellings)."""

    for name in names:
        if name in data:
            return data[name]
    return None


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def text(
    errors: Errors, field: str, value: Any, *, label: str, max_length: int, required: bool = True
) -> Optional[str]:
    cleaned = "" if value is None else str(value).strip()
    if not cleaned:
        if required:
            add_error(errors, field, f"{label} is required.")
        return None
    if len(cleaned) > max_length:
        add_error(errors, field, f"{label} must be {max_length} characters or fewer.")
        return None
    return cleaned


def amount(
    errors: Errors, field: str, value: Any, *, label: str = "Amount", allow_zero: bool = False
) -> Optional[int]:
    """Parse a decimal or localized money value into minor units."""

    if is_blank(value):
        add_error(errors, field, f"{label} is required.")
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        add_error(errors, field, f"Enter a valid number for {label.lower()}.")
        return None
    minor = coerce_minor_units(value)
    if minor < 0 or (minor == 0 and not allow_zero):
        add_error(errors, field, f"{label} must be positive.")
        return None
    if minor > MAX_AMOUNT:
        add_error(errors, field, f"{label} is too large.")
        return None
    return minor


def integer(
    errors: Errors, field: str, value: Any, *, label: str, minimum: int, maximum: int
) -> Optional[int]:
    if isinstance(value, bool):
        add_error(errors, field, f"{label} must be a whole number.")
        return None
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        add_error(errors, field, f"{label} must be a whole number.")
        return None
    if not minimum <= parsed <= maximum:
        add_error(errors, field, f"{label} must be between {minimum} and {maximum}.")
        return None
    return parsed


def calendar_day(errors: Errors, field: str, value: Any, *, label: str = "Date") -> Optional[date]:
    """Accept ``YYYY-MM-DD`` or an ISO-8601 timestamp, normalized to its UTC date."""

    raw = "" if value is None else str(value).strip()
    if not raw:
        add_error(errors, field, f"{label} is required.")
        return None
    try:
        if _DATE_ONLY.match(raw):
            parsed = datetime.strptime(raw, "%Y-%m-%d").date()
        elif _ISO_TIMESTAMP.match(raw):
            moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
            if moment.tzinfo is not None:
                moment = moment.astimezone(timezone.utc)
            parsed = moment.date()
        else:
            raise ValueError(raw)
    except ValueError:
        add_error(errors, field, f"{label} must be YYYY-MM-DD or ISO 8601.")
        return None
    if not 2000 <= parsed.year <= 2100:
        add_error(errors, field, f"{label} must fall between 2000 and 2100.")
        return None
    return parsed


def choice(
    errors: Errors, field: str, value: Any, *, label: str, options: tuple[str, ...], default: Optional[str] = None
) -> Optional[str]:
    if is_blank(value):
        if default is not None:
            return default
        add_error(errors, field, f"{label} is required.")
        return None
    if value not in options:
        add_error(errors, field, f"{label} must be one of {', '.join(options)}.")
        return None
    return value
