"""Tests for balance and invoice bookkeeping in the allocator."""

from __future__ import annotations

from datetime import date

import pytest
from sqlmodel import select

from salem.errors import RecordNotFoundError, ValidationError
from salem.models import Account, Invoice, Transaction
from salem.services.allocator import (
    AccountTransactionCommand,
    InvoiceUpdateCommand,
    allocate_card_transaction,
    delete_invoice,
    delete_transaction,
    mark_invoice_paid,
    record_account_transaction,
    reopen_invoice,
    signed_amount,
    update_invoice,
)


@pytest.mark.parametrize(
    ("amount", "kind", "expected"),
    [
        (1000, "withdrawal", -1000),
        (1000, "expense", -1000),
        (-1000, "expense", -1000),
        (1000, "deposit", 1000),
        (-1000, "income", 1000),
        (250, "transfer", 250),
    ],
)
def test_signed_amount(amount, kind, expected):
    assert signed_amount(amount, kind) == expected


def _command(account_id: int, amount: int, kind: str) -> AccountTransactionCommand:
    return AccountTransactionCommand(
        account_id=account_id,
        amount=amount,
        description=f"{kind} test",
        type=kind,
        occurred_on=date(2024, 3, 5),
    )


def test_deposit_and_withdrawal_move_balance(session_factory, user, account_factory):
    account = account_factory(balance=10_000)

    deposit = record_account_transaction(
        _command(account.id, 2_550, "deposit"), user_id=user.id, session_factory=session_factory
    )
    withdrawal = record_account_transaction(
        _command(account.id, 1_000, "withdrawal"), user_id=user.id, session_factory=session_factory
    )

    assert deposit.amount == 2_550
    assert withdrawal.amount == -1_000
    with session_factory() as session:
        assert session.get(Account, account.id).balance == 11_550


def test_account_transaction_requires_owned_account(session_factory, user_factory, account_factory):
    other = user_factory("someone-else")
    account = account_factory(owner=other)
    me = user_factory("me")

    with pytest.raises(RecordNotFoundError):
        record_account_transaction(
            _command(account.id, 100, "deposit"), user_id=me.id, session_factory=session_factory
        )

    with session_factory() as session:
        assert session.get(Account, account.id).balance == 0
        assert session.exec(select(Transaction)).first() is None


def test_allocate_card_transaction_trusts_given_invoice(
    session_factory, user, card_factory, invoice_factory
):
    card = card_factory(closing_day=10)
    # Purchase date belongs to April, the caller picked March anyway.
    invoice = invoice_factory(card, month=3, year=2024)

    with session_factory() as session:
        target = session.get(Invoice, invoice.id)
        transaction = allocate_card_transaction(
            session,
            user_id=user.id,
            card_id=card.id,
            invoice=target,
            amount=4_990,
            description="Mercado",
            occurred_on=date(2024, 3, 28),
        )
        session.commit()
        assert transaction.invoice_id == invoice.id
        assert transaction.amount == -4_990

    with session_factory() as session:
        assert session.get(Invoice, invoice.id).total_amount == 4_990


def test_card_credit_lowers_invoice_total(session_factory, user, card_factory, invoice_factory):
    card = card_factory()
    invoice = invoice_factory(card, total_amount=10_000)

    with session_factory() as session:
        allocate_card_transaction(
            session,
            user_id=user.id,
            card_id=card.id,
            invoice=session.get(Invoice, invoice.id),
            amount=2_500,
            description="Estorno",
            occurred_on=date(2024, 3, 2),
            transaction_type="income",
        )
        session.commit()

    with session_factory() as session:
        assert session.get(Invoice, invoice.id).total_amount == 7_500


def test_mark_paid_is_idempotent_and_reopen(session_factory, user, card_factory, invoice_factory):
    invoice = invoice_factory(card_factory(), total_amount=5_000)

    first = mark_invoice_paid(invoice.id, user_id=user.id, session_factory=session_factory)
    second = mark_invoice_paid(invoice.id, user_id=user.id, session_factory=session_factory)
    assert first.status == second.status == "paid"

    reopened = reopen_invoice(invoice.id, user_id=user.id, session_factory=session_factory)
    assert reopened.status == "open"


def test_update_invoice_applies_fields(session_factory, user, card_factory, invoice_factory):
    invoice = invoice_factory(card_factory(), total_amount=5_000)

    updated = update_invoice(
        invoice.id,
        InvoiceUpdateCommand(paid_amount=5_000, status="overdue", due_date=date(2024, 4, 20)),
        user_id=user.id,
        session_factory=session_factory,
    )

    assert updated.paid_amount == 5_000
    assert updated.status == "overdue"
    assert updated.due_date == date(2024, 4, 20)
    assert updated.total_amount == 5_000


def test_update_invoice_rejects_unknown_status(session_factory, user, card_factory, invoice_factory):
    invoice = invoice_factory(card_factory())

    with pytest.raises(ValidationError) as excinfo:
        update_invoice(
            invoice.id,
            InvoiceUpdateCommand(status="cancelled"),
            user_id=user.id,
            session_factory=session_factory,
        )
    assert "status" in excinfo.value.fields


def test_invoice_actions_on_missing_invoice(session_factory, user):
    with pytest.raises(RecordNotFoundError):
        mark_invoice_paid(999, user_id=user.id, session_factory=session_factory)
    with pytest.raises(RecordNotFoundError):
        delete_invoice(999, user_id=user.id, session_factory=session_factory)


def test_delete_invoice_detaches_transactions(
    session_factory, user, card_factory, invoice_factory, transaction_factory
):
    card = card_factory()
    invoice = invoice_factory(card, total_amount=1_000)
    transaction = transaction_factory(-1_000, card_id=card.id, invoice_id=invoice.id)

    delete_invoice(invoice.id, user_id=user.id, session_factory=session_factory)

    with session_factory() as session:
        assert session.get(Invoice, invoice.id) is None
        assert session.get(Transaction, transaction.id).invoice_id is None


def test_delete_account_transaction_reverses_balance(session_factory, user, account_factory):
    account = account_factory(balance=5_000)
    withdrawal = record_account_transaction(
        _command(account.id, 1_200, "withdrawal"), user_id=user.id, session_factory=session_factory
    )

    removed = delete_transaction(withdrawal.id, user_id=user.id, session_factory=session_factory)

    assert removed == 1
    with session_factory() as session:
        assert session.get(Account, account.id).balance == 5_000
        assert session.get(Transaction, withdrawal.id) is None


def test_delete_card_transaction_reverses_invoice_total(
    session_factory, user, card_factory, invoice_factory, transaction_factory
):
    card = card_factory()
    invoice = invoice_factory(card, total_amount=3_000)
    transaction = transaction_factory(-1_000, card_id=card.id, invoice_id=invoice.id)

    delete_transaction(transaction.id, user_id=user.id, session_factory=session_factory)

    with session_factory() as session:
        assert session.get(Invoice, invoice.id).total_amount == 2_000
