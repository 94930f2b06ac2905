"""JSON representations of the persisted models.

Monetary fields are emitted three ways: ``<name>`` as a decimal,
``<name>_minor`` as integer minor units and ``<name>_display`` formatted for
the configured locale.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from flask import current_app, has_app_context

from .models import Account, Card, Invoice, Transaction, User
from .services.invoice_period import is_invoice_open
from .services.money import DEFAULT_CURRENCY, DEFAULT_LOCALE, format_minor_units, to_decimal


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _display_settings() -> tuple[str, str]:
    config = current_app.config.get("SALEM_CONFIG") if has_app_context() else None
    if config is None:
        return DEFAULT_LOCALE, DEFAULT_CURRENCY
    return config.LOCALE, config.DEFAULT_CURRENCY


def money(name: str, minor_units: int, currency: Optional[str] = None) -> dict[str, Any]:
    locale, default_currency = _display_settings()
    return {
        name: to_decimal(minor_units),
        f"{name}_minor": minor_units,
        f"{name}_display": format_minor_units(
            minor_units, locale=locale, currency_code=currency or default_currency
        ),
    }


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "created_at": _iso(user.created_at),
        "last_login": _iso(user.last_login),
    }


def serialize_account(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type,
        **money("balance", account.balance, account.currency),
        "currency": account.currency,
        "created_at": _iso(account.created_at),
        "updated_at": _iso(account.updated_at),
    }


def serialize_card(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "alias": card.alias,
        "brand": card.brand,
        **money("total_limit", card.total_limit),
        "closing_day": card.closing_day,
        "due_day": card.due_day,
        "created_at": _iso(card.created_at),
        "updated_at": _iso(card.updated_at),
    }


def serialize_invoice(invoice: Invoice) -> dict[str, Any]:
    return {
        "id": invoice.id,
        "card_id": invoice.card_id,
        "month": invoice.month,
        "year": invoice.year,
        **money("total_amount", invoice.total_amount),
        **money("paid_amount", invoice.paid_amount),
        "status": invoice.status,
        "is_open": is_invoice_open(invoice),
        "closing_date": _iso(invoice.closing_date),
        "due_date": _iso(invoice.due_date),
        "created_at": _iso(invoice.created_at),
        "updated_at": _iso(invoice.updated_at),
    }


def serialize_transaction(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "account_id": transaction.account_id,
        "card_id": transaction.card_id,
        "invoice_id": transaction.invoice_id,
        "date": _iso(transaction.occurred_on),
        **money("amount", transaction.amount),
        "description": transaction.description,
        "type": transaction.type,
        "category": transaction.category,
        "finance_type": transaction.finance_type,
        "installments": transaction.installments,
        "current_installment": transaction.current_installment,
        "installment_group": transaction.installment_group,
        "created_at": _iso(transaction.created_at),
    }
