"""Database and extension wiring for the Flask app."""

from __future__ import annotations

from typing import Optional

from flask import Flask, current_app

from .config import BaseConfig
from .context import AppContext, create_app_context
from .infra.database import SessionFactory, bootstrap_database
from .services.exchange_rates import Fetcher, RateCache

EXTENSION_KEY = "salem"


def init_db(
    app: Flask,
    config: BaseConfig,
    *,
    rate_cache: Optional[RateCache] = None,
    rate_fetcher: Optional[Fetcher] = None,
) -> AppContext:
    """Create the engine, schema and application context for ``app``."""

    engine, session_factory = bootstrap_database(config)
    context = create_app_context(
        config, session_factory, rate_cache=rate_cache, rate_fetcher=rate_fetcher
    )
    state = app.extensions.setdefault(EXTENSION_KEY, {})
    state["engine"] = engine
    state["context"] = context
    return context


def get_context(app: Flask | None = None) -> AppContext:
    """Return the application context registered on the current app."""

    target = app or current_app
    context = target.extensions.get(EXTENSION_KEY, {}).get("context")
    if context is None:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Database engine not initialized")
    return context


def get_session_factory(app: Flask | None = None) -> SessionFactory:
    """Return the session factory registered on the current app."""

    return get_context(app).session_factory


def get_engine(app: Flask | None = None):
    """Return the initialized SQLModel engine."""

    target = app or current_app
    engine = target.extensions.get(EXTENSION_KEY, {}).get("engine")
    if engine is None:  # pragma: no cover
        raise RuntimeError("Database engine not initialized")
    return engine
