"""Credit card billing cycle calculations.

A card closes its invoice on ``closing_day`` and the invoice is due on
``due_day``. A purchase made after the closing day lands on the next invoice.
Days beyond the end of a month are not clamped: day 31 of a 30-day month is
the 1st of the following month.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Mapping

OPEN_STATUS = "open"


@dataclass(frozen=True, slots=True)
class InvoicePeriod:
    """The (month, year) bucket of an invoice and its key dates."""

    month: int  # 1-12
    year: int
    closing_date: date
    due_date: date


def calendar_date(year: int, month_index: int, day: int) -> date:
    """Build a date from a 0-based month index, overflowing out-of-range parts.

    ``calendar_date(2024, 1, 31)`` is 2024-03-02; ``calendar_date(2024, 12, 1)``
    is 2025-01-01.
    """
    year += month_index // 12
    month_index %= 12
    return date(year, month_index + 1, 1) + timedelta(days=day - 1)


def _next_month(month_index: int, year: int) -> tuple[int, int]:
    month_index += 1
    if month_index > 11:
        return 0, year + 1
    return month_index, year


def _period_dates(
    month_index: int, year: int, closing_day: int, due_day: int
) -> tuple[date, date]:
    closing = calendar_date(year, month_index, closing_day)

    due_month, due_year = month_index, year
    # Cards closing late in the month are usually due early in the next one.
    if due_day < closing_day:
        due_month, due_year = _next_month(due_month, due_year)
    due = calendar_date(due_year, due_month, due_day)
    return closing, due


def calculate_invoice_period(
    transaction_date: date, closing_day: int, due_day: int
) -> InvoicePeriod:
    """Return the invoice a purchase on ``transaction_date`` belongs to.

    A purchase ON the closing day stays in the current invoice; only later
    days roll over to the next one.
    """
    month_index = transaction_date.month - 1
    year = transaction_date.year

    if transaction_date.day > closing_day:
        month_index, year = _next_month(month_index, year)

    closing, due = _period_dates(month_index, year, closing_day, due_day)
    return InvoicePeriod(month=month_index + 1, year=year, closing_date=closing, due_date=due)


def invoice_dates(month: int, year: int, closing_day: int, due_day: int) -> tuple[date, date]:
    """Closing and due dates for an explicitly chosen 1-based ``(month, year)``."""

    return _period_dates(month - 1, year, closing_day, due_day)


def period_for(month: int, year: int, closing_day: int, due_day: int) -> InvoicePeriod:
    closing, due = invoice_dates(month, year, closing_day, due_day)
    return InvoicePeriod(month=month, year=year, closing_date=closing, due_date=due)


def shift_period(month: int, year: int, offset: int) -> tuple[int, int]:
    """Move a 1-based ``(month, year)`` by ``offset`` months."""

    total = year * 12 + (month - 1) + offset
    return total % 12 + 1, total // 12


def add_months(value: date, months: int) -> date:
    """Advance ``value`` by whole months keeping the day, with calendar overflow.

    Jan 31 plus one month is Mar 2 (or Mar 3 outside leap years).
    """
    return calendar_date(value.year, value.month - 1 + months, value.day)


def _field(invoice: Any, *names: str) -> Any:
    for name in names:
        if isinstance(invoice, Mapping):
            if name in invoice:
                return invoice[name]
        elif hasattr(invoice, name):
            return getattr(invoice, name)
    raise KeyError(names[0])


def is_invoice_open(invoice: Any) -> bool:
    """An invoice is open while flagged ``open`` AND not fully paid."""

    status = _field(invoice, "status")
    paid = _field(invoice, "paid_amount", "paidAmount")
    total = _field(invoice, "total_amount", "totalAmount")
    return status == OPEN_STATUS and paid < total


__all__ = [
    "InvoicePeriod",
    "add_months",
    "calculate_invoice_period",
    "calendar_date",
    "invoice_dates",
    "is_invoice_open",
    "period_for",
    "shift_period",
]
