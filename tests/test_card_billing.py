"""Tests for splitting card purchases and billing them into invoices."""

from __future__ import annotations

from datetime import date

import pytest
from sqlmodel import select

from salem.errors import RecordNotFoundError
from salem.models import Invoice, Transaction
from salem.services.card_billing import (
    CardPurchaseCommand,
    bill_card_purchase,
    plan_card_purchase,
    resolve_invoice,
    strip_installment_suffix,
)
from salem.services.invoice_period import calculate_invoice_period
from salem.services.allocator import delete_transaction


def _purchase(card_id: int, **overrides) -> CardPurchaseCommand:
    values = dict(
        card_id=card_id,
        amount=10_000,
        description="Notebook",
        occurred_on=date(2024, 3, 5),
    )
    values.update(overrides)
    return CardPurchaseCommand(**values)


def test_strip_installment_suffix():
    assert strip_installment_suffix("TV (1/6)") == "TV"
    assert strip_installment_suffix("TV (12/12)") == "TV"
    assert strip_installment_suffix("TV") == "TV"
    assert strip_installment_suffix("Plan (annual)") == "Plan (annual)"


def test_single_purchase_plan_uses_card_cycle(card_factory):
    card = card_factory(closing_day=10, due_day=17)

    [charge] = plan_card_purchase(_purchase(card.id, occurred_on=date(2024, 3, 15)), card)

    assert charge.amount == 10_000
    assert charge.description == "Notebook"
    assert (charge.period.month, charge.period.year) == (4, 2024)
    assert charge.finance_type == "upfront"


def test_installment_plan_splits_amount_and_advances_months(card_factory):
    card = card_factory(closing_day=10, due_day=17)

    charges = plan_card_purchase(_purchase(card.id, amount=10_000, installments=3), card)

    assert [c.amount for c in charges] == [3_333, 3_333, 3_334]
    assert sum(c.amount for c in charges) == 10_000
    assert [c.description for c in charges] == ["Notebook (1/3)", "Notebook (2/3)", "Notebook (3/3)"]
    assert [c.occurred_on for c in charges] == [date(2024, 3, 5), date(2024, 4, 5), date(2024, 5, 5)]
    assert [(c.period.month, c.period.year) for c in charges] == [(3, 2024), (4, 2024), (5, 2024)]
    assert {c.finance_type for c in charges} == {"installment"}


def test_installment_part_rounds_half_up(card_factory):
    card = card_factory()

    charges = plan_card_purchase(_purchase(card.id, amount=1_001, installments=2), card)

    # 1001 / 2 = 500.5 rounds up; the last part absorbs the difference.
    assert [c.amount for c in charges] == [501, 500]


def test_installment_plan_strips_existing_suffix(card_factory):
    card = card_factory()

    charges = plan_card_purchase(_purchase(card.id, description="Sofa (1/4)", installments=2), card)

    assert charges[0].description == "Sofa (1/2)"


def test_pinned_invoice_overrides_cycle_and_wraps_year(card_factory):
    card = card_factory(closing_day=25, due_day=5)

    charges = plan_card_purchase(
        _purchase(card.id, installments=3, invoice_month=11, invoice_year=2024), card
    )

    assert [(c.period.month, c.period.year) for c in charges] == [(11, 2024), (12, 2024), (1, 2025)]
    assert charges[2].period.due_date == date(2025, 2, 5)


def test_resolve_invoice_creates_then_reuses(session_factory, user, card_factory):
    card = card_factory(closing_day=10, due_day=17)
    period = calculate_invoice_period(date(2024, 3, 5), 10, 17)

    with session_factory() as session:
        created = resolve_invoice(session, user_id=user.id, card_id=card.id, period=period)
        again = resolve_invoice(session, user_id=user.id, card_id=card.id, period=period)
        assert created.id == again.id
        assert created.status == "open"
        assert created.total_amount == 0
        assert created.closing_date == date(2024, 3, 10)
        assert created.due_date == date(2024, 3, 17)


def test_bill_card_purchase_reuses_invoice_for_same_period(session_factory, user, card_factory):
    card = card_factory(closing_day=10, due_day=17)

    bill_card_purchase(_purchase(card.id, amount=2_000), user_id=user.id, session_factory=session_factory)
    bill_card_purchase(
        _purchase(card.id, amount=3_000, occurred_on=date(2024, 3, 9)),
        user_id=user.id,
        session_factory=session_factory,
    )

    with session_factory() as session:
        invoices = session.exec(select(Invoice).where(Invoice.card_id == card.id)).all()
        assert len(invoices) == 1
        assert invoices[0].total_amount == 5_000
        assert (invoices[0].month, invoices[0].year) == (3, 2024)


def test_bill_installments_spreads_across_invoices(session_factory, user, card_factory):
    card = card_factory(closing_day=10, due_day=17)

    created = bill_card_purchase(
        _purchase(card.id, amount=90_000, installments=3),
        user_id=user.id,
        session_factory=session_factory,
    )

    assert len(created) == 3
    assert len({t.installment_group for t in created}) == 1
    assert all(t.amount == -30_000 for t in created)
    assert len({t.invoice_id for t in created}) == 3

    with session_factory() as session:
        totals = [i.total_amount for i in session.exec(select(Invoice).order_by(Invoice.month)).all()]
        assert totals == [30_000, 30_000, 30_000]


def test_deleting_one_installment_removes_whole_purchase(session_factory, user, card_factory):
    card = card_factory()
    created = bill_card_purchase(
        _purchase(card.id, amount=60_000, installments=2),
        user_id=user.id,
        session_factory=session_factory,
    )

    removed = delete_transaction(created[1].id, user_id=user.id, session_factory=session_factory)

    assert removed == 2
    with session_factory() as session:
        assert session.exec(select(Transaction)).all() == []
        assert {i.total_amount for i in session.exec(select(Invoice)).all()} == {0}


def test_bill_card_purchase_unknown_card(session_factory, user):
    with pytest.raises(RecordNotFoundError):
        bill_card_purchase(_purchase(404), user_id=user.id, session_factory=session_factory)
