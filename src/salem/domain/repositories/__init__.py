"""Repository protocols."""

from .account import AccountRepository
from .card import CardRepository
from .invoice import InvoiceRepository
from .transaction import TransactionRepository

__all__ = [
    "AccountRepository",
    "CardRepository",
    "InvoiceRepository",
    "TransactionRepository",
]
