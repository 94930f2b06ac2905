"""Blueprint exports."""

from . import accounts, auth, cards, currency, invoices, transactions

__all__ = [
    "accounts",
    "auth",
    "cards",
    "currency",
    "invoices",
    "transactions",
]
