"""SQLAlchemy-backed movement store.

Decimal fields are stored as text so amounts round-trip exactly.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import text

from argfolio.application.ports.database import DatabaseEnginePort
from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.models import Movement
from argfolio.infrastructure.accounts_repository import ADVANCE_WATERMARK_SQL
from argfolio.utils.decimal_utils import coerce_optional_decimal


MOVEMENT_COLUMNS = """
    id, account_id, instrument_id, type, datetime_iso, trade_currency,
    quantity, unit_price, total_amount, fx_at_trade, fee_amount,
    fee_currency, notes
"""

SELECT_POSITION_MOVEMENTS_SQL = text(
    f"""
    SELECT {MOVEMENT_COLUMNS}
    FROM movements
    WHERE instrument_id = :instrument_id AND account_id = :account_id
    ORDER BY datetime_iso, id
    """
)

SELECT_ALL_MOVEMENTS_SQL = text(
    f"""
    SELECT {MOVEMENT_COLUMNS}
    FROM movements
    ORDER BY datetime_iso, id
    """
)

SELECT_ACCOUNT_MOVEMENTS_SQL = text(
    f"""
    SELECT {MOVEMENT_COLUMNS}
    FROM movements
    WHERE account_id = :account_id
    ORDER BY datetime_iso, id
    """
)

UPSERT_MOVEMENT_SQL = text(
    """
    INSERT INTO movements (
        id,
        account_id,
        instrument_id,
        type,
        datetime_iso,
        trade_currency,
        quantity,
        unit_price,
        total_amount,
        fx_at_trade,
        fee_amount,
        fee_currency,
        notes
    )
    VALUES (
        :id,
        :account_id,
        :instrument_id,
        :type,
        :datetime_iso,
        :trade_currency,
        :quantity,
        :unit_price,
        :total_amount,
        :fx_at_trade,
        :fee_amount,
        :fee_currency,
        :notes
    )
    ON CONFLICT (id) DO UPDATE SET
        account_id = excluded.account_id,
        instrument_id = excluded.instrument_id,
        type = excluded.type,
        datetime_iso = excluded.datetime_iso,
        trade_currency = excluded.trade_currency,
        quantity = excluded.quantity,
        unit_price = excluded.unit_price,
        total_amount = excluded.total_amount,
        fx_at_trade = excluded.fx_at_trade,
        fee_amount = excluded.fee_amount,
        fee_currency = excluded.fee_currency,
        notes = excluded.notes
    """
)


class SqlAlchemyMovementsRepository(MovementsRepositoryPort):
    """Repository backed by SQLAlchemy for movements."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the engine.
        """
        self._db_port = db_port

    def fetch_movements(
        self,
        instrument_id: str,
        account_id: str,
    ) -> list[Movement]:
        """Return the movements of one (instrument, account) pair."""
        return self._fetch(
            SELECT_POSITION_MOVEMENTS_SQL,
            {"instrument_id": instrument_id, "account_id": account_id},
        )

    def fetch_all_movements(self) -> list[Movement]:
        """Return every movement in (datetime, id) order."""
        return self._fetch(SELECT_ALL_MOVEMENTS_SQL, {})

    def fetch_account_movements(self, account_id: str) -> list[Movement]:
        """Return every movement of an account."""
        return self._fetch(
            SELECT_ACCOUNT_MOVEMENTS_SQL, {"account_id": account_id}
        )

    def upsert_movements(self, movements: list[Movement]) -> int:
        """Insert or replace movements by id."""
        if not movements:
            return 0
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            conn.execute(
                UPSERT_MOVEMENT_SQL,
                [movement_to_params(movement) for movement in movements],
            )
        return len(movements)

    def record_accrual(
        self,
        account_id: str,
        movements: list[Movement],
        accrued_through: date,
    ) -> None:
        """Upsert accrual movements and advance the watermark atomically.

        Args:
            account_id: Account the interest belongs to.
            movements: INTEREST movements to upsert.
            accrued_through: New last accrued date.
        """
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            if movements:
                conn.execute(
                    UPSERT_MOVEMENT_SQL,
                    [movement_to_params(movement) for movement in movements],
                )
            conn.execute(
                ADVANCE_WATERMARK_SQL,
                {
                    "account_id": account_id,
                    "accrued_through": accrued_through.isoformat(),
                },
            )

    def _fetch(self, query, params: dict[str, str]) -> list[Movement]:
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(query, params).all()
        return [movement_from_row(row) for row in rows]


def movement_from_row(row) -> Movement:
    """Build a movement from a database row."""
    return Movement(
        id=row.id,
        account_id=row.account_id,
        type=row.type,
        datetime_iso=row.datetime_iso,
        trade_currency=row.trade_currency,
        instrument_id=row.instrument_id,
        quantity=coerce_optional_decimal(row.quantity),
        unit_price=coerce_optional_decimal(row.unit_price),
        total_amount=coerce_optional_decimal(row.total_amount),
        fx_at_trade=coerce_optional_decimal(row.fx_at_trade),
        fee_amount=coerce_optional_decimal(row.fee_amount),
        fee_currency=row.fee_currency,
        notes=row.notes,
    )


def movement_to_params(movement: Movement) -> dict[str, str | None]:
    """Return SQL parameters for a movement with Decimals as text."""
    return {
        "id": movement.id,
        "account_id": movement.account_id,
        "instrument_id": movement.instrument_id,
        "type": movement.type,
        "datetime_iso": movement.datetime_iso,
        "trade_currency": movement.trade_currency,
        "quantity": _to_text(movement.quantity),
        "unit_price": _to_text(movement.unit_price),
        "total_amount": _to_text(movement.total_amount),
        "fx_at_trade": _to_text(movement.fx_at_trade),
        "fee_amount": _to_text(movement.fee_amount),
        "fee_currency": movement.fee_currency,
        "notes": movement.notes,
    }


def _to_text(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


__all__ = [
    "SqlAlchemyMovementsRepository",
    "UPSERT_MOVEMENT_SQL",
    "movement_from_row",
    "movement_to_params",
]
