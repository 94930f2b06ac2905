"""SQLModel table exports."""

from .account import ACCOUNT_TYPES, Account
from .card import Card
from .invoice import INVOICE_STATUSES, Invoice
from .transaction import FINANCE_TYPES, TRANSACTION_TYPES, Transaction
from .user import User

__all__ = [
    "ACCOUNT_TYPES",
    "Account",
    "Card",
    "FINANCE_TYPES",
    "INVOICE_STATUSES",
    "Invoice",
    "TRANSACTION_TYPES",
    "Transaction",
    "User",
]
