"""Billing card purchases into the invoices of their billing cycles."""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlmodel import Session, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.card import Card
from ..models.invoice import Invoice
from ..models.transaction import Transaction
from .allocator import allocate_card_transaction, get_owned
from .invoice_period import (
    InvoicePeriod,
    add_months,
    calculate_invoice_period,
    period_for,
    shift_period,
)

logger = get_logger(__name__)

_INSTALLMENT_SUFFIX = re.compile(r" \(\d+/\d+\)$")


@dataclass(frozen=True, slots=True)
class CardPurchaseCommand:
    """A validated card purchase; ``amount`` is the full price in minor units."""

    card_id: int
    amount: int
    description: str
    occurred_on: date
    type: str = "expense"
    category: Optional[str] = None
    finance_type: str = "upfront"
    installments: int = 1
    invoice_month: Optional[int] = None
    invoice_year: Optional[int] = None

    @property
    def pinned_invoice(self) -> bool:
        return bool(self.invoice_month and self.invoice_year)


@dataclass(frozen=True, slots=True)
class PlannedCharge:
    amount: int
    description: str
    occurred_on: date
    period: InvoicePeriod
    current_installment: int
    installments: int
    finance_type: str


def strip_installment_suffix(description: str) -> str:
    """Drop a trailing ``" (i/n)"`` marker, e.g. ``"TV (1/6)"`` -> ``"TV"``."""

    return _INSTALLMENT_SUFFIX.sub("", description).strip()


def _half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _period(command: CardPurchaseCommand, card: Card, occurred_on: date, offset: int) -> InvoicePeriod:
    if command.pinned_invoice:
        month, year = shift_period(command.invoice_month, command.invoice_year, offset)  # type: ignore[arg-type]
        return period_for(month, year, card.closing_day, card.due_day)
    return calculate_invoice_period(occurred_on, card.closing_day, card.due_day)


def plan_card_purchase(command: CardPurchaseCommand, card: Card) -> list[PlannedCharge]:
    """Split a purchase into the charges it produces, one per installment.

    Every part but the last is ``round(amount / n)``; the last absorbs the
    remainder so the parts always sum to the purchase amount. Each part is
    dated one month after the previous and lands in its own invoice.
    """
    total = abs(command.amount)
    count = max(1, command.installments)

    if count == 1:
        return [
            PlannedCharge(
                amount=total,
                description=command.description,
                occurred_on=command.occurred_on,
                period=_period(command, card, command.occurred_on, 0),
                current_installment=1,
                installments=1,
                finance_type=command.finance_type,
            )
        ]

    part = _half_up(total / count)
    remainder = total - part * (count - 1)
    base_description = strip_installment_suffix(command.description)

    charges: list[PlannedCharge] = []
    for index in range(count):
        occurred_on = add_months(command.occurred_on, index)
        charges.append(
            PlannedCharge(
                amount=remainder if index == count - 1 else part,
                description=f"{base_description} ({index + 1}/{count})",
                occurred_on=occurred_on,
                period=_period(command, card, occurred_on, index),
                current_installment=index + 1,
                installments=count,
                finance_type="installment",
            )
        )
    return charges


def resolve_invoice(
    session: Session, *, user_id: int, card_id: int, period: InvoicePeriod
) -> Invoice:
    """Return the card's invoice for ``period``, creating an empty open one if needed."""

    invoice = session.exec(
        select(Invoice)
        .where(Invoice.card_id == card_id)
        .where(Invoice.year == period.year)
        .where(Invoice.month == period.month)
    ).first()
    if invoice is not None:
        return invoice

    invoice = Invoice(
        user_id=user_id,
        card_id=card_id,
        month=period.month,
        year=period.year,
        total_amount=0,
        paid_amount=0,
        status="open",
        closing_date=period.closing_date,
        due_date=period.due_date,
    )
    session.add(invoice)
    session.flush()
    logger.info(
        "Invoice created",
        extra={"card_id": card_id, "month": period.month, "year": period.year},
    )
    return invoice


def bill_card_purchase(
    command: CardPurchaseCommand,
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> list[Transaction]:
    """Record a card purchase, creating invoices on demand, in one session."""

    with session_factory() as session:
        card = get_owned(session, Card, command.card_id, user_id=user_id)
        charges = plan_card_purchase(command, card)
        group = uuid.uuid4().hex if len(charges) > 1 else None

        created: list[Transaction] = []
        for charge in charges:
            invoice = resolve_invoice(
                session, user_id=user_id, card_id=card.id, period=charge.period  # type: ignore[arg-type]
            )
            created.append(
                allocate_card_transaction(
                    session,
                    user_id=user_id,
                    card_id=card.id,  # type: ignore[arg-type]
                    invoice=invoice,
                    amount=charge.amount,
                    description=charge.description,
                    occurred_on=charge.occurred_on,
                    transaction_type=command.type,
                    category=command.category,
                    finance_type=charge.finance_type,
                    installments=charge.installments,
                    current_installment=charge.current_installment,
                    installment_group=group,
                )
            )
        session.commit()
        for transaction in created:
            session.refresh(transaction)
        session.expunge_all()

    logger.info(
        "Card purchase billed",
        extra={
            "card_id": command.card_id,
            "installments": len(created),
            "invoice_ids": sorted({t.invoice_id for t in created}),
        },
    )
    return created


__all__ = [
    "CardPurchaseCommand",
    "PlannedCharge",
    "bill_card_purchase",
    "plan_card_purchase",
    "resolve_invoice",
    "strip_installment_suffix",
]
