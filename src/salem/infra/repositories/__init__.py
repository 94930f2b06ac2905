"""SQLModel repository implementations."""

from .account import SQLModelAccountRepository
from .card import SQLModelCardRepository
from .invoice import SQLModelInvoiceRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelCardRepository",
    "SQLModelInvoiceRepository",
    "SQLModelTransactionRepository",
]
