"""Port for the movement store."""

from datetime import date
from typing import Protocol

from argfolio.domain.models import Movement


class MovementsRepositoryPort(Protocol):
    """Port exposing read and write access to movements."""

    def fetch_movements(
        self,
        instrument_id: str,
        account_id: str,
    ) -> list[Movement]:
        """Return the movements of one (instrument, account) pair."""

    def fetch_all_movements(self) -> list[Movement]:
        """Return every movement."""

    def fetch_account_movements(self, account_id: str) -> list[Movement]:
        """Return every movement of an account, cash included."""

    def upsert_movements(self, movements: list[Movement]) -> int:
        """Insert or replace movements by id and return the count written."""

    def record_accrual(
        self,
        account_id: str,
        movements: list[Movement],
        accrued_through: date,
    ) -> None:
        """Persist accrual movements and the watermark atomically.

        Args:
            account_id: Account the interest belongs to.
            movements: INTEREST movements to upsert.
            accrued_through: New last accrued date; never moves backwards.
        """


__all__ = ["MovementsRepositoryPort"]
