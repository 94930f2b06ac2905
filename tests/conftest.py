"""Pytest configuration and shared fixtures for Salem tests.

This module provides database fixtures, test data factories, and a Flask
client wired to an in-memory database, so tests never touch a real data
directory.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from salem.models import Account, Card, Invoice, Transaction, User
from salem.infra.database import create_session_factory
from salem.services.invoice_period import invoice_dates

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory committing on success and rolling back on error."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    def _create_user(username: str = "tester") -> User:
        with session_factory() as session:
            row = User(username=username, password_hash="dummy-hash")
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory()


@pytest.fixture
def account_factory(session_factory, user):
    """Factory for creating test accounts.

    Returns:
        Callable: Function that creates and persists Account instances
    """

    def _create_account(
        name: str = "Conta Corrente",
        balance: int = 0,
        account_type: str = "corrente",
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        with session_factory() as session:
            account = Account(name=name, balance=balance, type=account_type, user_id=owner.id)
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    return _create_account


@pytest.fixture
def card_factory(session_factory, user):
    """Factory for creating test cards (balances and limits in minor units)."""

    def _create_card(
        alias: str = "Nubank",
        brand: str = "Mastercard",
        total_limit: int = 500_000,
        closing_day: int = 10,
        due_day: int = 17,
        owner: User | None = None,
    ) -> Card:
        owner = owner or user
        with session_factory() as session:
            card = Card(
                alias=alias,
                brand=brand,
                total_limit=total_limit,
                closing_day=closing_day,
                due_day=due_day,
                user_id=owner.id,
            )
            session.add(card)
            session.commit()
            session.refresh(card)
            session.expunge(card)
            return card

    return _create_card


@pytest.fixture
def invoice_factory(session_factory, user):
    """Factory for creating invoices with dates derived from the card's cycle."""

    def _create_invoice(
        card: Card,
        month: int = 3,
        year: int = 2024,
        total_amount: int = 0,
        paid_amount: int = 0,
        status: str = "open",
    ) -> Invoice:
        closing, due = invoice_dates(month, year, card.closing_day, card.due_day)
        with session_factory() as session:
            invoice = Invoice(
                user_id=card.user_id,
                card_id=card.id,
                month=month,
                year=year,
                total_amount=total_amount,
                paid_amount=paid_amount,
                status=status,
                closing_date=closing,
                due_date=due,
            )
            session.add(invoice)
            session.commit()
            session.refresh(invoice)
            session.expunge(invoice)
            return invoice

    return _create_invoice


@pytest.fixture
def transaction_factory(session_factory, user):
    """Factory for creating raw transactions without touching balances.

    Args of the returned callable:
        amount: Signed minor units (negative for outflow)
    """

    def _create_transaction(
        amount: int,
        description: str = "Test transaction",
        occurred_on: date | None = None,
        account_id: int | None = None,
        card_id: int | None = None,
        invoice_id: int | None = None,
        transaction_type: str = "expense",
        finance_type: str = "upfront",
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        with session_factory() as session:
            transaction = Transaction(
                user_id=owner.id,
                amount=amount,
                description=description,
                occurred_on=occurred_on or date(2024, 3, 5),
                account_id=account_id,
                card_id=card_id,
                invoice_id=invoice_id,
                type=transaction_type,
                finance_type=finance_type,
            )
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    return _create_transaction


# =============================================================================
# Flask Fixtures
# =============================================================================

FAKE_RATES = {"base": "BRL", "date": "2024-03-01", "rates": {"USD": 0.2, "EUR": 0.25, "BRL": 1.0}}


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Flask app on an in-memory database with a canned exchange-rate provider."""

    monkeypatch.setenv("SALEM_DATA_DIR", str(tmp_path))
    from salem import TestConfig, create_app

    application = create_app(TestConfig(), rate_fetcher=lambda base: FAKE_RATES)
    yield application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Test client logged in as a freshly registered user."""

    response = client.post("/auth/register", json={"username": "maria", "password": "s3cret-pass"})
    assert response.status_code == 201
    return client


def assert_money_equal(payload: dict, name: str, minor_units: int) -> None:
    """Check both representations of a monetary response field."""

    assert payload[f"{name}_minor"] == minor_units
    assert payload[name] == pytest.approx(minor_units / 100)
