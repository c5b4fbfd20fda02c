"""SQLAlchemy-backed repository for accounts."""

from datetime import date

from sqlalchemy import text

from argfolio.application.ports.accounts_repository import (
    AccountsRepositoryPort,
)
from argfolio.application.ports.database import DatabaseEnginePort
from argfolio.domain.models import Account, CashYieldConfig
from argfolio.utils.decimal_utils import coerce_optional_decimal


SELECT_ACCOUNTS_SQL = text(
    """
    SELECT id, name, kind, default_currency, yield_enabled, yield_tna,
           yield_currency, yield_compounding, last_accrued_date
    FROM accounts
    ORDER BY name, id
    """
)

SELECT_ACCOUNT_SQL = text(
    """
    SELECT id, name, kind, default_currency, yield_enabled, yield_tna,
           yield_currency, yield_compounding, last_accrued_date
    FROM accounts
    WHERE id = :id
    """
)

# The accrual watermark never moves backwards on upsert.
UPSERT_ACCOUNT_SQL = text(
    """
    INSERT INTO accounts (
        id,
        name,
        kind,
        default_currency,
        yield_enabled,
        yield_tna,
        yield_currency,
        yield_compounding,
        last_accrued_date
    )
    VALUES (
        :id,
        :name,
        :kind,
        :default_currency,
        :yield_enabled,
        :yield_tna,
        :yield_currency,
        :yield_compounding,
        :last_accrued_date
    )
    ON CONFLICT (id) DO UPDATE SET
        name = excluded.name,
        kind = excluded.kind,
        default_currency = excluded.default_currency,
        yield_enabled = excluded.yield_enabled,
        yield_tna = excluded.yield_tna,
        yield_currency = excluded.yield_currency,
        yield_compounding = excluded.yield_compounding,
        last_accrued_date = CASE
            WHEN accounts.last_accrued_date IS NULL
              OR accounts.last_accrued_date < excluded.last_accrued_date
            THEN excluded.last_accrued_date
            ELSE accounts.last_accrued_date
        END
    """
)

# ISO dates compare correctly as text.
ADVANCE_WATERMARK_SQL = text(
    """
    UPDATE accounts
    SET last_accrued_date = :accrued_through
    WHERE id = :account_id
      AND (last_accrued_date IS NULL OR last_accrued_date < :accrued_through)
    """
)


class SqlAlchemyAccountsRepository(AccountsRepositoryPort):
    """Repository backed by SQLAlchemy for accounts."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the engine.
        """
        self._db_port = db_port

    def fetch_accounts(self) -> list[Account]:
        """Return every account ordered by name."""
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_ACCOUNTS_SQL).all()
        return [account_from_row(row) for row in rows]

    def fetch_account(self, account_id: str) -> Account | None:
        """Return one account, or None when missing."""
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            row = conn.execute(SELECT_ACCOUNT_SQL, {"id": account_id}).first()
        return account_from_row(row) if row is not None else None

    def upsert_accounts(self, accounts: list[Account]) -> int:
        """Insert or replace accounts by id."""
        if not accounts:
            return 0
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            conn.execute(
                UPSERT_ACCOUNT_SQL,
                [account_to_params(account) for account in accounts],
            )
        return len(accounts)

    def update_last_accrued_date(
        self,
        account_id: str,
        accrued_through: date,
    ) -> None:
        """Move the accrual watermark forward, never backwards."""
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            conn.execute(
                ADVANCE_WATERMARK_SQL,
                {
                    "account_id": account_id,
                    "accrued_through": accrued_through.isoformat(),
                },
            )


def account_from_row(row) -> Account:
    """Build an account from a database row."""
    cash_yield = None
    tna = coerce_optional_decimal(row.yield_tna)
    if tna is not None:
        cash_yield = CashYieldConfig(
            enabled=bool(row.yield_enabled),
            tna=tna,
            currency=row.yield_currency or "ARS",
            compounding=row.yield_compounding or "DAILY",
            last_accrued_date=(
                date.fromisoformat(row.last_accrued_date)
                if row.last_accrued_date
                else None
            ),
        )
    return Account(
        id=row.id,
        name=row.name,
        kind=row.kind,
        default_currency=row.default_currency,
        cash_yield=cash_yield,
    )


def account_to_params(account: Account) -> dict[str, object]:
    """Return SQL parameters for an account."""
    config = account.cash_yield
    return {
        "id": account.id,
        "name": account.name,
        "kind": account.kind,
        "default_currency": account.default_currency,
        "yield_enabled": int(bool(config and config.enabled)),
        "yield_tna": str(config.tna) if config else None,
        "yield_currency": config.currency if config else None,
        "yield_compounding": config.compounding if config else None,
        "last_accrued_date": (
            config.last_accrued_date.isoformat()
            if config and config.last_accrued_date
            else None
        ),
    }


__all__ = [
    "SqlAlchemyAccountsRepository",
    "UPSERT_ACCOUNT_SQL",
    "ADVANCE_WATERMARK_SQL",
    "account_from_row",
    "account_to_params",
]
