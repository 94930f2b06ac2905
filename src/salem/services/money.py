"""Conversions between integer minor units (cents) and decimal currency values.

Storage convention:
- Monetary columns hold INTEGER minor units (``1050`` is R$ 10,50).
- Request payloads and responses carry DECIMAL values (``10.5``).
- Every storage write and every API read crosses this module exactly once.

The lenient helpers never raise: malformed input degrades to ``0``. Callers
that must reject malformed input use :func:`parse_localized_amount_strict`.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

from babel.numbers import format_currency, format_decimal

from ..errors import MoneyParseError

DEFAULT_LOCALE = "pt_BR"
DEFAULT_CURRENCY = "BRL"

_DISALLOWED_CHARS = re.compile(r"[^\d,.\-]")
# Longest leading float literal, mirroring JavaScript's parseFloat on the cleaned text.
_FLOAT_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def _as_finite_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_minor_units(decimal_amount: Any) -> int:
    """Convert a decimal amount (reais) into integer minor units (centavos).

    Rounds half up (``0.005`` becomes ``1``, ``-0.005`` becomes ``0``).
    Non-finite, NaN or non-numeric input returns ``0``.

    Example:
        to_minor_units(10.5) -> 1050
    """
    number = _as_finite_float(decimal_amount)
    if number is None:
        return 0
    scaled = number * 100 + 0.5
    if not math.isfinite(scaled):
        return 0
    return int(math.floor(scaled))


def to_decimal(minor_units: Any) -> float:
    """Convert integer minor units into a decimal amount.

    Example:
        to_decimal(1050) -> 10.5
    """
    number = _as_finite_float(minor_units)
    if number is None:
        return 0
    return number / 100


def _normalize(text: str) -> str:
    cleaned = _DISALLOWED_CHARS.sub("", text)
    # pt-BR uses the comma as decimal mark; only the first one is rewritten.
    return cleaned.replace(",", ".", 1)


def parse_localized_amount(text: Any) -> int:
    """Parse user-typed money such as ``"R$ 10,50"`` or ``"10.50"`` into minor units.

    Anything that does not start with a number after normalization yields ``0``.

    Examples:
        parse_localized_amount("R$ 10,50") -> 1050
        parse_localized_amount("10.50") -> 1050
        parse_localized_amount("abc") -> 0
    """
    if not text or not isinstance(text, str):
        return 0
    match = _FLOAT_PREFIX.match(_normalize(text))
    if match is None:
        return 0
    return to_minor_units(float(match.group()))


def parse_localized_amount_strict(text: Any) -> int:
    """Like :func:`parse_localized_amount` but raise on malformed input.

    The whole normalized string must be a number; trailing garbage, empty
    input and ambiguous separators (``"1.234,56"``) raise ``MoneyParseError``.
    """
    if not isinstance(text, str) or not text.strip():
        raise MoneyParseError(text)
    normalized = _normalize(text)
    if not _FLOAT_PREFIX.fullmatch(normalized) or not math.isfinite(float(normalized) * 100):
        raise MoneyParseError(text)
    return to_minor_units(float(normalized))


def coerce_minor_units(value: Any) -> int:
    """Normalize a request value (number or localized string) into minor units."""

    if isinstance(value, str):
        return parse_localized_amount(value)
    return to_minor_units(value)


def _babel_locale(locale: str) -> str:
    return locale.replace("-", "_")


def format_minor_units(
    minor_units: int,
    *,
    show_symbol: bool = True,
    locale: str = DEFAULT_LOCALE,
    currency_code: str = DEFAULT_CURRENCY,
) -> str:
    """Render minor units for display, e.g. ``"R$ 10,50"``.

    With ``show_symbol=False`` the currency symbol is dropped but two
    fractional digits and the locale's grouping are kept (``"1.234,50"``).
    """
    number = _as_finite_float(minor_units)
    value = Decimal(int(number or 0)) / 100
    babel_locale = _babel_locale(locale)
    if show_symbol:
        return format_currency(value, currency_code, locale=babel_locale)
    return format_decimal(value, format="#,##0.00", locale=babel_locale)


__all__ = [
    "coerce_minor_units",
    "format_minor_units",
    "parse_localized_amount",
    "parse_localized_amount_strict",
    "to_decimal",
    "to_minor_units",
]
