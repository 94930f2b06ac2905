"""Tests for user-scoped SQLModel repositories."""

from __future__ import annotations

from datetime import date

from salem.infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCardRepository,
    SQLModelInvoiceRepository,
    SQLModelTransactionRepository,
)
from salem.models import Account, Invoice


def test_account_crud_is_scoped_by_user(session_factory, user_factory):
    repo = SQLModelAccountRepository(session_factory)
    owner = user_factory("owner")
    stranger = user_factory("stranger")

    account = repo.create(Account(name="Poupança", type="poupanca", user_id=owner.id), user_id=owner.id)

    assert repo.get_by_id(account.id, user_id=owner.id).name == "Poupança"
    assert repo.get_by_id(account.id, user_id=stranger.id) is None
    assert repo.list_all(user_id=stranger.id) == []
    assert repo.update(account.id, {"name": "X"}, user_id=stranger.id) is None
    assert repo.delete(account.id, user_id=stranger.id) is False

    updated = repo.update(account.id, {"name": "Reserva", "balance": 1_500}, user_id=owner.id)
    assert (updated.name, updated.balance) == ("Reserva", 1_500)
    assert repo.delete(account.id, user_id=owner.id) is True
    assert repo.list_all(user_id=owner.id) == []


def test_deleting_card_removes_its_invoices(session_factory, user, card_factory, invoice_factory):
    card = card_factory()
    invoice_factory(card, month=3)
    invoice_factory(card, month=4)
    repo = SQLModelCardRepository(session_factory)

    assert repo.delete(card.id, user_id=user.id) is True

    with session_factory() as session:
        assert session.get(Invoice, 1) is None
    assert SQLModelInvoiceRepository(session_factory).list_all(user_id=user.id) == []


def test_invoice_listing_orders_and_filters(session_factory, user, card_factory, invoice_factory):
    nubank = card_factory(alias="Nubank")
    inter = card_factory(alias="Inter")
    invoice_factory(nubank, month=1, year=2024, total_amount=100, status="paid", paid_amount=100)
    invoice_factory(nubank, month=2, year=2024, total_amount=300, paid_amount=100)
    invoice_factory(inter, month=2, year=2024, total_amount=100, paid_amount=100)
    repo = SQLModelInvoiceRepository(session_factory)

    assert [(i.year, i.month) for i in repo.list_all(user_id=user.id)][0] == (2024, 2)
    assert [i.total_amount for i in repo.list_open(user_id=user.id)] == [300]
    assert len(repo.list_by_card(nubank.id, user_id=user.id)) == 2
    assert len(repo.list_for_period(2024, 2, user_id=user.id)) == 2
    assert [i.card_id for i in repo.list_for_period(2024, 2, user_id=user.id, card_ids=[inter.id])] == [
        inter.id
    ]


def test_transaction_filters(
    session_factory, user, account_factory, card_factory, invoice_factory, transaction_factory
):
    account = account_factory()
    nubank = card_factory(alias="Nubank")
    inter = card_factory(alias="Inter")
    invoice = invoice_factory(nubank)
    transaction_factory(500, account_id=account.id, transaction_type="deposit", occurred_on=date(2024, 1, 2))
    transaction_factory(-700, card_id=nubank.id, invoice_id=invoice.id, occurred_on=date(2024, 3, 1))
    transaction_factory(
        -900, card_id=inter.id, finance_type="subscription", occurred_on=date(2024, 3, 3)
    )
    repo = SQLModelTransactionRepository(session_factory)

    assert [t.amount for t in repo.filter_by_account(account.id, user_id=user.id)] == [500]
    assert [t.amount for t in repo.filter_by_card(nubank.id, user_id=user.id)] == [-700]
    assert [t.amount for t in repo.filter_by_cards(user_id=user.id)] == [-900, -700]
    assert [t.amount for t in repo.filter_by_cards([nubank.id], user_id=user.id)] == [-700]
    assert [
        t.amount for t in repo.filter_by_cards(user_id=user.id, finance_type="subscription")
    ] == [-900]
    assert [t.amount for t in repo.filter_by_invoices([invoice.id], user_id=user.id)] == [-700]
    assert repo.filter_by_invoices([], user_id=user.id) == []
    assert len(repo.filter_by_date_range(date(2024, 3, 1), date(2024, 3, 31), user_id=user.id)) == 2
