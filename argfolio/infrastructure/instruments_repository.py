"""SQLAlchemy-backed repository for instruments."""

from sqlalchemy import text

from argfolio.application.ports.database import DatabaseEnginePort
from argfolio.application.ports.instruments_repository import (
    InstrumentsRepositoryPort,
)
from argfolio.domain.models import Instrument


SELECT_INSTRUMENTS_SQL = text(
    """
    SELECT id, symbol, name, category, native_currency
    FROM instruments
    ORDER BY symbol, id
    """
)

SELECT_INSTRUMENT_SQL = text(
    """
    SELECT id, symbol, name, category, native_currency
    FROM instruments
    WHERE id = :id
    """
)

UPSERT_INSTRUMENT_SQL = text(
    """
    INSERT INTO instruments (id, symbol, name, category, native_currency)
    VALUES (:id, :symbol, :name, :category, :native_currency)
    ON CONFLICT (id) DO UPDATE SET
        symbol = excluded.symbol,
        name = excluded.name,
        category = excluded.category,
        native_currency = excluded.native_currency
    """
)


class SqlAlchemyInstrumentsRepository(InstrumentsRepositoryPort):
    """Repository backed by SQLAlchemy for instruments."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        self._db_port = db_port

    def fetch_instruments(self) -> list[Instrument]:
        """Return every instrument ordered by symbol."""
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_INSTRUMENTS_SQL).all()
        return [self._to_instrument(row) for row in rows]

    def fetch_instrument(self, instrument_id: str) -> Instrument | None:
        """Return one instrument, or None when missing."""
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            row = conn.execute(
                SELECT_INSTRUMENT_SQL, {"id": instrument_id}
            ).first()
        return self._to_instrument(row) if row is not None else None

    def upsert_instruments(self, instruments: list[Instrument]) -> int:
        """Insert or replace instruments by id."""
        if not instruments:
            return 0
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            conn.execute(
                UPSERT_INSTRUMENT_SQL,
                [instrument_to_params(item) for item in instruments],
            )
        return len(instruments)

    @staticmethod
    def _to_instrument(row) -> Instrument:
        return Instrument(
            id=row.id,
            symbol=row.symbol,
            name=row.name,
            category=row.category,
            native_currency=row.native_currency,
        )


def instrument_to_params(instrument: Instrument) -> dict[str, str]:
    """Return SQL parameters for an instrument."""
    return {
        "id": instrument.id,
        "symbol": instrument.symbol,
        "name": instrument.name,
        "category": instrument.category,
        "native_currency": instrument.native_currency,
    }


__all__ = [
    "SqlAlchemyInstrumentsRepository",
    "UPSERT_INSTRUMENT_SQL",
    "instrument_to_params",
]
