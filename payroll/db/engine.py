"""SQLAlchemy engine and session factory for the record store.

The engine is module-level state initialised once by :func:`init_engine_from_url`
(the application lifespan and the CLI both call it). ``session_scope`` is the
only sanctioned way to get a transactional session outside a request.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("payroll").getChild("db")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """Create the engine and session factory, replacing any previous ones."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    url = make_url(database_url)
    kwargs: dict = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    _engine = create_engine(url, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("Engine initialised: dialect=%s echo=%s", url.get_backend_name(), echo)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


@contextmanager
def session_scope(factory: sessionmaker[Session] | None = None) -> Generator[Session, None, None]:
    """Commit on normal exit, roll back and re-raise on error."""
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("Transaction rolled back")
        raise
    finally:
        session.close()


def create_tables() -> None:
    from payroll.db.base import Base
    from payroll.db import tables  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    from payroll.db.base import Base

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
        _engine = None
    _SessionFactory = None
