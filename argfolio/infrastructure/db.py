"""Database infrastructure for the portfolio engine.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the movement store, and to create its tables. It
belongs to the infrastructure layer because it deals with external systems
(SQLite or PostgreSQL).
"""

import os
from pathlib import Path
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import QueuePool

from argfolio.application.ports.database import DatabaseEnginePort
from argfolio.infrastructure.settings import default_database_url


SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        kind TEXT NOT NULL,
        default_currency TEXT NOT NULL,
        yield_enabled INTEGER NOT NULL DEFAULT 0,
        yield_tna TEXT,
        yield_currency TEXT,
        yield_compounding TEXT,
        last_accrued_date TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS instruments (
        id TEXT PRIMARY KEY,
        symbol TEXT NOT NULL,
        name TEXT NOT NULL,
        category TEXT NOT NULL,
        native_currency TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS movements (
        id TEXT PRIMARY KEY,
        account_id TEXT NOT NULL,
        instrument_id TEXT,
        type TEXT NOT NULL,
        datetime_iso TEXT NOT NULL,
        trade_currency TEXT NOT NULL,
        quantity TEXT,
        unit_price TEXT,
        total_amount TEXT,
        fx_at_trade TEXT,
        fee_amount TEXT,
        fee_currency TEXT,
        notes TEXT
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_movements_position
    ON movements (instrument_id, account_id)
    """,
)


def _get_env_var(name: str, default: str | None = None) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.
        default: Value returned when the variable is missing.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the variable is missing and there is no default.
    """
    dotenv.load_dotenv()
    value = os.getenv(name) or default
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: SQLite engines share connections across threads; server
        databases get a small connection pool with health checks.
    """
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the movement store.

    Returns:
        Engine: Lazily initialized engine.
    """
    global _engine
    if _engine is None:
        db_url = _get_env_var("ARGFOLIO_DB_URL", default_database_url())
        _engine = _create_engine(db_url)
    return _engine


def ensure_schema(db_port: DatabaseEnginePort) -> None:
    """Create the portfolio tables when they do not exist.

    Args:
        db_port: Port providing the engine.
    """
    engine = db_port.get_engine()
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.exec_driver_sql(statement)


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so application use cases can depend only on the protocol.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        """Initialize the adapter.

        Args:
            engine: Optional engine; defaults to the shared singleton.
        """
        self._engine = engine

    def get_engine(self) -> Engine:
        """Get the engine for the movement store.

        Returns:
            Engine: SQLAlchemy engine.
        """
        return self._engine if self._engine is not None else get_engine()


__all__ = [
    "SCHEMA_STATEMENTS",
    "get_engine",
    "ensure_schema",
    "SqlAlchemyDatabaseEngineAdapter",
]
