from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from dealer_payments.infra.config import (
    database_url,
    db_max_overflow,
    db_pool_recycle_seconds,
    db_pool_size,
)

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """
    Return the process-wide engine, creating it on first use.

    Pool sizing comes from DB_POOL_SIZE / DB_MAX_OVERFLOW / DB_POOL_RECYCLE_SECONDS.
    Payment requests hold a connection only for the inventory lookup, and a
    bulk run reads the whole lot in a single query.
    """
    global _engine
    if _engine is None:
        _engine = create_engine(
            database_url(),
            pool_size=db_pool_size(),
            max_overflow=db_max_overflow(),
            pool_recycle=db_pool_recycle_seconds(),
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


@contextmanager
def read_session() -> Iterator[Session]:
    """Session for inventory lookups. Never commits; anything pending is rolled back."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@contextmanager
def get_session() -> Iterator[Session]:
    """Session for writes (seeding). Commits on success, rolls back on error."""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
