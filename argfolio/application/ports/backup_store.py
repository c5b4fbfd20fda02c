"""Port for restoring a full backup."""

from typing import Protocol

from argfolio.domain.models import Account, Instrument, Movement


class BackupStorePort(Protocol):
    """Port writing every record of a backup as one unit."""

    def restore(
        self,
        accounts: list[Account],
        instruments: list[Instrument],
        movements: list[Movement],
    ) -> tuple[int, int, int]:
        """Upsert all records atomically.

        Args:
            accounts: Accounts to upsert by id.
            instruments: Instruments to upsert by id.
            movements: Movements to upsert by id.

        Returns:
            tuple[int, int, int]: Accounts, instruments and movements written.
        """


__all__ = ["BackupStorePort"]
