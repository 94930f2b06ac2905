"""Engine, schema and session helpers.

All database work runs through a :data:`SessionFactory`: a zero-argument
callable returning a context manager that commits when the block succeeds
and rolls back (re-raising) when it fails.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create the engine for ``config.DATABASE_URL``.

    SQLite connections get foreign key enforcement switched on, which the
    driver leaves off by default.
    """
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_database(engine: Engine) -> None:
    """Create any missing tables."""
    from .. import models  # noqa: F401 - registers every table on the metadata

    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ready", extra={"tables": sorted(SQLModel.metadata.tables)})


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error.

    Objects stay readable after commit (``expire_on_commit=False``) so
    services can return them once the session is closed.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine: Engine) -> SessionFactory:
    def factory() -> ContextManager[Session]:
        return session_scope(engine)

    return factory


def bootstrap_database(config: BaseConfig) -> tuple[Engine, SessionFactory]:
    """Build the engine, create the schema and return ``(engine, session_factory)``.

    Shared by the app factory and the CLI.
    """
    engine = create_db_engine(config)
    init_database(engine)
    return engine, create_session_factory(engine)
