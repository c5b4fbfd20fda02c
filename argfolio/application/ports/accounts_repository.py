"""Port for reading and writing accounts."""

from datetime import date
from typing import Protocol

from argfolio.domain.models import Account


class AccountsRepositoryPort(Protocol):
    """Port exposing access to accounts and their yield settings."""

    def fetch_accounts(self) -> list[Account]:
        """Return every account."""

    def fetch_account(self, account_id: str) -> Account | None:
        """Return one account, or None when it does not exist."""

    def upsert_accounts(self, accounts: list[Account]) -> int:
        """Insert or replace accounts by id and return the count written."""

    def update_last_accrued_date(
        self,
        account_id: str,
        accrued_through: date,
    ) -> None:
        """Move the accrual watermark forward."""


__all__ = ["AccountsRepositoryPort"]
