"""Currency conversion backed by a cached rate table.

Rates are quoted against a base currency (BRL by default): ``rates["USD"]``
is how many dollars one real buys. Conversions between two foreign
currencies go through the base.
"""

from __future__ import annotations

import json
import time
import urllib.request
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Optional, Protocol

from ..logging_config import get_logger
from .money import to_decimal, to_minor_units

logger = get_logger(__name__)

CACHE_KEY = "exchange-rates"
DEFAULT_TTL_SECONDS = 60 * 60
FALLBACK_RATES: Mapping[str, float] = {"USD": 0.18, "EUR": 0.17, "BRL": 1.0}

Fetcher = Callable[[str], Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: Any
    expires_at: float


class RateCache(Protocol):
    """Key/value store with per-entry expiry."""

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for ``key`` or ``None`` when missing or expired."""
        ...

    def put(self, key: str, value: Any, expires_at: float) -> None:
        ...


class InMemoryRateCache:
    """Process-local :class:`RateCache`; expired entries are dropped on read."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, value: Any, expires_at: float) -> None:
        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

    def clear(self) -> None:
        self._entries.clear()


@dataclass(frozen=True, slots=True)
class RateTable:
    base: str
    date: str
    rates: Mapping[str, float]

    def rate(self, currency: str) -> float:
        # Unknown currencies convert 1:1.
        return self.rates.get(currency) or 1.0


@dataclass(frozen=True, slots=True)
class Conversion:
    from_currency: str
    to_currency: str
    amount: float
    result: float
    rate: float
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_currency,
            "to": self.to_currency,
            "amount": self.amount,
            "result": self.result,
            "rate": self.rate,
            "timestamp": self.timestamp,
        }


def http_fetcher(url: str, *, timeout: float = 10.0) -> Fetcher:
    """Build a fetcher that GETs ``<url>/<base>`` and decodes the JSON body."""

    def fetch(base: str) -> Mapping[str, Any]:
        with urllib.request.urlopen(f"{url.rstrip('/')}/{base}", timeout=timeout) as response:
            return json.load(response)

    return fetch


class ExchangeRateService:
    """Serve conversions from cached rates, refreshing them through ``fetcher``."""

    def __init__(
        self,
        cache: RateCache,
        fetcher: Fetcher,
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        base: str = "BRL",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.ttl = ttl
        self.base = base
        self._clock = clock

    def _fallback(self) -> RateTable:
        return RateTable(base=self.base, date=date.today().isoformat(), rates=dict(FALLBACK_RATES))

    def rates(self) -> RateTable:
        """Current rate table; fixed fallback rates when the provider fails."""

        entry = self.cache.get(CACHE_KEY)
        if entry is not None:
            return entry.value

        try:
            payload = self.fetcher(self.base)
            table = RateTable(
                base=str(payload.get("base", self.base)),
                date=str(payload.get("date") or date.today().isoformat()),
                rates={code: float(rate) for code, rate in payload["rates"].items()},
            )
        except Exception:
            logger.warning("Exchange rate fetch failed, using fallback rates", exc_info=True)
            return self._fallback()

        self.cache.put(CACHE_KEY, table, self._clock() + self.ttl)
        logger.info("Exchange rates refreshed", extra={"base": table.base, "rate_date": table.date})
        return table

    def convert(self, amount: float, from_currency: str = "USD", to_currency: str = "BRL") -> Conversion:
        """Convert ``amount`` between currencies, rounding the result to cents."""

        table = self.rates()
        if from_currency == self.base:
            result = amount * table.rate(to_currency)
            rate = table.rate(to_currency)
        elif to_currency == self.base:
            result = amount / table.rate(from_currency)
            rate = 1 / table.rate(from_currency)
        else:
            result = amount / table.rate(from_currency) * table.rate(to_currency)
            rate = 1 / table.rate(from_currency)

        return Conversion(
            from_currency=from_currency,
            to_currency=to_currency,
            amount=amount,
            result=round_half_up_cents(result),
            rate=rate,
            timestamp=table.date,
        )


def round_half_up_cents(value: float) -> float:
    return to_decimal(to_minor_units(value))


__all__ = [
    "CACHE_KEY",
    "CacheEntry",
    "Conversion",
    "ExchangeRateService",
    "FALLBACK_RATES",
    "InMemoryRateCache",
    "RateCache",
    "RateTable",
    "http_fetcher",
]
