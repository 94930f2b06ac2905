"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .domain.repositories import (
    AccountRepository,
    CardRepository,
    InvoiceRepository,
    TransactionRepository,
)
from .infra.database import SessionFactory
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCardRepository,
    SQLModelInvoiceRepository,
    SQLModelTransactionRepository,
)
from .services.exchange_rates import (
    ExchangeRateService,
    Fetcher,
    InMemoryRateCache,
    RateCache,
    http_fetcher,
)


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    session_factory: SessionFactory

    account_repo: AccountRepository
    card_repo: CardRepository
    invoice_repo: InvoiceRepository
    transaction_repo: TransactionRepository

    exchange_rates: ExchangeRateService


def create_app_context(
    config: BaseConfig,
    session_factory: SessionFactory,
    *,
    rate_cache: Optional[RateCache] = None,
    rate_fetcher: Optional[Fetcher] = None,
) -> AppContext:
    """Wire repositories and services around an existing session factory."""

    exchange_rates = ExchangeRateService(
        rate_cache or InMemoryRateCache(),
        rate_fetcher or http_fetcher(config.EXCHANGE_RATE_URL),
        ttl=config.EXCHANGE_RATE_TTL,
        base=config.DEFAULT_CURRENCY,
    )
    return AppContext(
        config=config,
        session_factory=session_factory,
        account_repo=SQLModelAccountRepository(session_factory),
        card_repo=SQLModelCardRepository(session_factory),
        invoice_repo=SQLModelInvoiceRepository(session_factory),
        transaction_repo=SQLModelTransactionRepository(session_factory),
        exchange_rates=exchange_rates,
    )
