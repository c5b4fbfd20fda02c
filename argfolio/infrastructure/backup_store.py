"""SQLAlchemy-backed backup restore."""

from argfolio.application.ports.backup_store import BackupStorePort
from argfolio.application.ports.database import DatabaseEnginePort
from argfolio.domain.models import Account, Instrument, Movement
from argfolio.infrastructure.accounts_repository import (
    UPSERT_ACCOUNT_SQL,
    account_to_params,
)
from argfolio.infrastructure.cache import QueryCache
from argfolio.infrastructure.instruments_repository import (
    UPSERT_INSTRUMENT_SQL,
    instrument_to_params,
)
from argfolio.infrastructure.movements_repository import (
    UPSERT_MOVEMENT_SQL,
    movement_to_params,
)


class SqlAlchemyBackupStore(BackupStorePort):
    """Restore accounts, instruments and movements in one transaction."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        cache: QueryCache | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the engine.
            cache: Query cache to invalidate after a restore.
        """
        self._db_port = db_port
        self._cache = cache

    def restore(
        self,
        accounts: list[Account],
        instruments: list[Instrument],
        movements: list[Movement],
    ) -> tuple[int, int, int]:
        """Upsert every record, rolling back all of them on failure."""
        engine = self._db_port.get_engine()
        try:
            with engine.begin() as conn:
                if accounts:
                    conn.execute(
                        UPSERT_ACCOUNT_SQL,
                        [account_to_params(item) for item in accounts],
                    )
                if instruments:
                    conn.execute(
                        UPSERT_INSTRUMENT_SQL,
                        [instrument_to_params(item) for item in instruments],
                    )
                if movements:
                    conn.execute(
                        UPSERT_MOVEMENT_SQL,
                        [movement_to_params(item) for item in movements],
                    )
        finally:
            if self._cache is not None:
                self._cache.invalidate()
        return len(accounts), len(instruments), len(movements)


__all__ = ["SqlAlchemyBackupStore"]
