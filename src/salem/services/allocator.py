"""Persisting transactions and keeping balances and invoice totals in step.

Every mutation here is a read-then-write inside one session: fetch the owning
row, compute the new value, write it back. There is no locking; concurrent
requests against the same account may race.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from typing import Optional, TypeVar

from sqlmodel import Session, SQLModel, select

from ..errors import RecordNotFoundError, ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import Account
from ..models.invoice import INVOICE_STATUSES, Invoice
from ..models.transaction import Transaction

logger = get_logger(__name__)

OUTFLOW_TYPES = frozenset({"withdrawal", "expense"})

ModelT = TypeVar("ModelT", bound=SQLModel)


def signed_amount(amount: int, transaction_type: str) -> int:
    """Return ``amount`` negated for outflows and positive for everything else."""

    magnitude = abs(int(amount))
    return -magnitude if transaction_type in OUTFLOW_TYPES else magnitude


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_owned(session: Session, model: type[ModelT], record_id: int, *, user_id: int) -> ModelT:
    """Load ``model`` by id for ``user_id`` or raise ``RecordNotFoundError``."""

    record = session.exec(
        select(model).where(model.id == record_id).where(model.user_id == user_id)  # type: ignore[attr-defined]
    ).first()
    if record is None:
        raise RecordNotFoundError(model.__name__, record_id)
    return record


@dataclass(frozen=True, slots=True)
class AccountTransactionCommand:
    """A validated deposit or withdrawal; ``amount`` is in minor units."""

    account_id: int
    amount: int
    description: str
    type: str
    occurred_on: date


@dataclass(frozen=True, slots=True)
class InvoiceUpdateCommand:
    """Field updates for an invoice; ``None`` leaves a field untouched."""

    total_amount: Optional[int] = None
    paid_amount: Optional[int] = None
    due_date: Optional[date] = None
    closing_date: Optional[date] = None
    status: Optional[str] = None

    def changes(self) -> dict:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


def record_account_transaction(
    command: AccountTransactionCommand,
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Transaction:
    """Insert an account transaction and move the account balance by its signed amount."""

    amount = signed_amount(command.amount, command.type)
    with session_factory() as session:
        account = get_owned(session, Account, command.account_id, user_id=user_id)

        transaction = Transaction(
            user_id=user_id,
            account_id=account.id,
            amount=amount,
            description=command.description,
            type=command.type,
            occurred_on=command.occurred_on,
        )
        session.add(transaction)

        previous_balance = account.balance
        account.balance = previous_balance + amount
        account.updated_at = _utcnow()
        session.add(account)
        session.commit()
        session.refresh(transaction)
        session.expunge(transaction)

    logger.info(
        "Account balance updated",
        extra={
            "account_id": command.account_id,
            "transaction_id": transaction.id,
            "previous_balance": previous_balance,
            "amount": amount,
        },
    )
    return transaction


def allocate_card_transaction(
    session: Session,
    *,
    user_id: int,
    card_id: int,
    invoice: Invoice,
    amount: int,
    description: str,
    occurred_on: date,
    transaction_type: str = "expense",
    category: Optional[str] = None,
    finance_type: str = "upfront",
    installments: int = 1,
    current_installment: int = 1,
    installment_group: Optional[str] = None,
) -> Transaction:
    """Persist a card transaction against an already resolved ``invoice``.

    The invoice is trusted as given; the billing period is the caller's
    concern. Outflows raise the invoice total, credits lower it.
    """
    signed = signed_amount(amount, transaction_type)
    transaction = Transaction(
        user_id=user_id,
        card_id=card_id,
        invoice_id=invoice.id,
        amount=signed,
        description=description,
        type=transaction_type,
        occurred_on=occurred_on,
        category=category,
        finance_type=finance_type,
        installments=installments,
        current_installment=current_installment,
        installment_group=installment_group,
    )
    session.add(transaction)

    invoice.total_amount -= signed
    invoice.updated_at = _utcnow()
    session.add(invoice)
    session.flush()
    return transaction


def _set_invoice_status(
    invoice_id: int, status: str, *, user_id: int, session_factory: SessionFactory
) -> Invoice:
    with session_factory() as session:
        invoice = get_owned(session, Invoice, invoice_id, user_id=user_id)
        previous = invoice.status
        if previous != status:
            invoice.status = status
            invoice.updated_at = _utcnow()
            session.add(invoice)
            session.commit()
            session.refresh(invoice)
        session.expunge(invoice)

    if previous != status:
        logger.info(
            "Invoice status changed",
            extra={"invoice_id": invoice_id, "from_status": previous, "to_status": status},
        )
    return invoice


def mark_invoice_paid(invoice_id: int, *, user_id: int, session_factory: SessionFactory) -> Invoice:
    """Flag an invoice as paid; calling it again is a no-op."""

    return _set_invoice_status(invoice_id, "paid", user_id=user_id, session_factory=session_factory)


def reopen_invoice(invoice_id: int, *, user_id: int, session_factory: SessionFactory) -> Invoice:
    return _set_invoice_status(invoice_id, "open", user_id=user_id, session_factory=session_factory)


def update_invoice(
    invoice_id: int,
    command: InvoiceUpdateCommand,
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Invoice:
    """Apply direct field updates after checking the status against the allowed set."""

    changes = command.changes()
    status = changes.get("status")
    if status is not None and status not in INVOICE_STATUSES:
        raise ValidationError({"status": [f"Status must be one of {', '.join(INVOICE_STATUSES)}."]})

    with session_factory() as session:
        invoice = get_owned(session, Invoice, invoice_id, user_id=user_id)
        for key, value in changes.items():
            setattr(invoice, key, value)
        invoice.updated_at = _utcnow()
        session.add(invoice)
        session.commit()
        session.refresh(invoice)
        session.expunge(invoice)

    logger.info("Invoice updated", extra={"invoice_id": invoice_id, "fields": sorted(changes)})
    return invoice


def delete_invoice(invoice_id: int, *, user_id: int, session_factory: SessionFactory) -> None:
    """Remove an invoice; its transactions stay but lose the invoice link."""

    with session_factory() as session:
        invoice = get_owned(session, Invoice, invoice_id, user_id=user_id)
        session.delete(invoice)
        session.commit()
    logger.info("Invoice deleted", extra={"invoice_id": invoice_id})


def delete_transaction(
    transaction_id: int, *, user_id: int, session_factory: SessionFactory
) -> int:
    """Delete a transaction (every part of it for installment purchases).

    Account balances and invoice totals are moved back by the removed
    amounts. Returns the number of rows deleted.
    """
    with session_factory() as session:
        transaction = get_owned(session, Transaction, transaction_id, user_id=user_id)
        if transaction.installment_group:
            targets = list(
                session.exec(
                    select(Transaction)
                    .where(Transaction.user_id == user_id)
                    .where(Transaction.installment_group == transaction.installment_group)
                ).all()
            )
        else:
            targets = [transaction]

        for target in targets:
            if target.account_id is not None:
                account = session.get(Account, target.account_id)
                if account is not None:
                    account.balance -= target.amount
                    account.updated_at = _utcnow()
                    session.add(account)
            if target.invoice_id is not None:
                invoice = session.get(Invoice, target.invoice_id)
                if invoice is not None:
                    invoice.total_amount += target.amount
                    invoice.updated_at = _utcnow()
                    session.add(invoice)
            session.delete(target)
        session.commit()

    logger.info(
        "Transaction deleted",
        extra={"transaction_id": transaction_id, "removed": len(targets)},
    )
    return len(targets)


__all__ = [
    "AccountTransactionCommand",
    "InvoiceUpdateCommand",
    "allocate_card_transaction",
    "delete_invoice",
    "delete_transaction",
    "get_owned",
    "mark_invoice_paid",
    "record_account_transaction",
    "reopen_invoice",
    "signed_amount",
    "update_invoice",
]
