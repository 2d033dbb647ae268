"""Database connection and transaction management for DayDeck.

The storage handle is an explicit `Database` object passed to every
repository and store; there is no module-level engine.

SQLite (the default) is configured so that BEGIN is emitted by SQLAlchemy
rather than lazily by the driver. That makes DDL transactional, which the
migration runner and the task save rely on for all-or-nothing behavior.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from daydeck import config

logger = logging.getLogger(__name__)

# Base class for declarative models
Base = declarative_base()


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def is_memory_url(database_url: str) -> bool:
    return _is_sqlite_url(database_url) and (":memory:" in database_url or database_url.rstrip("/") == "sqlite:")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": config.sql_echo(),
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # Background writes run on a worker thread.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if is_memory_url(database_url):
            # One shared connection, otherwise every checkout sees an empty database.
            engine_kwargs["poolclass"] = StaticPool
    return engine_kwargs


def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign keys and hand transaction control to SQLAlchemy."""
    if not isinstance(dbapi_conn, sqlite3.Connection):
        return
    # Let SQLAlchemy emit BEGIN itself (see `_begin_sqlite_transaction`).
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    # Enable foreign keys (required for cascade / set-null)
    cursor.execute("PRAGMA foreign_keys=ON")
    # WAL allows reads while the background writer holds a write transaction
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str) -> Engine:
    engine = create_engine(database_url, **get_engine_kwargs(database_url))
    if _is_sqlite_url(database_url):
        event.listen(engine, "connect", set_sqlite_pragmas)
        event.listen(engine, "begin", _begin_sqlite_transaction)
    return engine


class Database:
    """Durable storage handle: one engine plus a session factory."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        self.url = database_url or config.database_url()
        self.engine = engine or build_engine(self.url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        """A plain session for reads. Caller closes it."""
        return self.SessionLocal()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """One atomic unit of work: commit on success, roll back and re-raise on failure."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
