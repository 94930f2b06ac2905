"""Salem application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Optional

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig, load_config
from .extensions import init_db
from .logging_config import setup_logging
from .services.exchange_rates import Fetcher, RateCache
from .web import register_error_handlers


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths, one per API resource."""

    yield "salem.blueprints.auth"
    yield "salem.blueprints.accounts"
    yield "salem.blueprints.cards"
    yield "salem.blueprints.invoices"
    yield "salem.blueprints.transactions"
    yield "salem.blueprints.currency"


def create_app(
    config: str | BaseConfig | None = None,
    *,
    rate_cache: Optional[RateCache] = None,
    rate_fetcher: Optional[Fetcher] = None,
) -> Flask:
    """Create and configure the Flask application instance.

    ``config`` is either a configuration object or the name of one
    (``development``, ``testing``, ``default``); ``SALEM_CONFIG`` is used
    when omitted.
    """
    config_obj = config if isinstance(config, BaseConfig) else load_config(config)

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(config_obj.flask_settings())
    app.config["SALEM_CONFIG"] = config_obj
    app.json.sort_keys = False  # type: ignore[attr-defined]

    setup_logging(config_obj)
    init_db(app, config_obj, rate_cache=rate_cache, rate_fetcher=rate_fetcher)
    _register_blueprints(app)
    register_error_handlers(app)
    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
