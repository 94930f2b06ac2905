"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Salem"
    DB_FILENAME = "salem.db"
    DEBUG = False
    TESTING = False
    DEFAULT_EXCHANGE_RATE_URL = "https://api.exchangerate-api.com/v4/latest"

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SALEM_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("SALEM_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("SALEM_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_CURRENCY = os.getenv("SALEM_DEFAULT_CURRENCY", "BRL").upper()
        self.LOCALE = os.getenv("SALEM_LOCALE", "pt_BR")
        self.EXCHANGE_RATE_URL = os.getenv(
            "SALEM_EXCHANGE_RATE_URL", self.DEFAULT_EXCHANGE_RATE_URL
        )
        self.EXCHANGE_RATE_TTL = _env_int("SALEM_EXCHANGE_RATE_TTL", 60 * 60)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("SALEM_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("SALEM_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}

    def flask_settings(self) -> dict[str, Any]:
        """Return the subset of settings Flask reads from ``app.config``."""

        return {
            "SECRET_KEY": self.SECRET_KEY,
            "DEBUG": self.DEBUG,
            "TESTING": self.TESTING,
            "SESSION_COOKIE_HTTPONLY": True,
            "SESSION_COOKIE_SAMESITE": "Lax",
        }


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Isolated configuration for the test suite."""

    __test__ = False  # not a pytest test class
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
        self.SECRET_KEY = "test-secret"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        # One shared connection so the in-memory database survives across sessions.
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}


CONFIGS: dict[str, type[BaseConfig]] = {
    "default": BaseConfig,
    "development": DevConfig,
    "testing": TestConfig,
}


def load_config(name: str | None = None) -> BaseConfig:
    """Instantiate the configuration registered under ``name``."""

    key = (name or os.getenv("SALEM_CONFIG", "development")).lower()
    try:
        config_cls = CONFIGS[key]
    except KeyError as exc:
        raise ValueError(f"Unknown configuration: {key}") from exc
    return config_cls()
