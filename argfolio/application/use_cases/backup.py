"""Use cases to export and import versioned JSON backups.

A backup holds every account, instrument and movement. Import upserts by
id, so restoring a backup onto a database that already holds it leaves
the same set of records with no duplicates.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from decimal import Decimal
import json
from typing import Any

from argfolio.application.ports.accounts_repository import (
    AccountsRepositoryPort,
)
from argfolio.application.ports.backup_store import BackupStorePort
from argfolio.application.ports.instruments_repository import (
    InstrumentsRepositoryPort,
)
from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.errors import BackupFormatError
from argfolio.domain.models import (
    Account,
    CashYieldConfig,
    Instrument,
    Movement,
)
from argfolio.domain.services.normalization import (
    normalize_currency,
    normalize_symbol,
)
from argfolio.domain.services.validation import (
    RejectedMovement,
    validate_movement_batch,
)
from argfolio.infrastructure.logging.logger import get_app_logger
from argfolio.utils.decimal_utils import coerce_optional_decimal


BACKUP_VERSION = 1

MOVEMENT_DECIMAL_FIELDS = (
    "quantity",
    "unit_price",
    "total_amount",
    "fx_at_trade",
    "fee_amount",
)


@dataclass(frozen=True)
class ImportBackupResult:
    """Counts written by a backup import.

    Attributes:
        accounts: Accounts upserted.
        instruments: Instruments upserted.
        movements: Movements upserted.
        rejected: Movements skipped because they were malformed.
    """

    accounts: int
    instruments: int
    movements: int
    rejected: list[RejectedMovement] = field(default_factory=list)


class ExportBackupUseCase:
    """Serialize the whole portfolio to JSON."""

    def __init__(
        self,
        accounts_repository: AccountsRepositoryPort,
        instruments_repository: InstrumentsRepositoryPort,
        movements_repository: MovementsRepositoryPort,
        logger=None,
    ) -> None:
        self._accounts = accounts_repository
        self._instruments = instruments_repository
        self._movements = movements_repository
        self._logger = logger or get_app_logger()

    def execute(self) -> str:
        """Return the backup as a JSON document.

        Returns:
            str: JSON with ``version``, ``exported_at``, ``accounts``,
            ``instruments`` and ``movements``.
        """
        accounts = self._accounts.fetch_accounts()
        instruments = self._instruments.fetch_instruments()
        movements = self._movements.fetch_all_movements()
        payload = {
            "version": BACKUP_VERSION,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "accounts": [account_to_dict(item) for item in accounts],
            "instruments": [instrument_to_dict(item) for item in instruments],
            "movements": [movement_to_dict(item) for item in movements],
        }
        self._logger.info(
            f"Exported backup: {len(accounts)} accounts, "
            f"{len(instruments)} instruments, {len(movements)} movements"
        )
        return json.dumps(payload, indent=2, ensure_ascii=False)


class ImportBackupUseCase:
    """Restore a JSON backup by upserting every record in one unit."""

    def __init__(
        self,
        backup_store: BackupStorePort,
        logger=None,
    ) -> None:
        self._store = backup_store
        self._logger = logger or get_app_logger()

    def execute(self, raw_json: str) -> ImportBackupResult:
        """Import a backup document.

        Args:
            raw_json: JSON produced by ExportBackupUseCase.

        Returns:
            ImportBackupResult: Counts written and rejected movements.

        Raises:
            BackupFormatError: If the payload is not a valid version 1
                backup.
        """
        payload = _load_payload(raw_json)
        accounts = [account_from_dict(item) for item in payload["accounts"]]
        instruments = [
            instrument_from_dict(item) for item in payload["instruments"]
        ]
        movements = [movement_from_dict(item) for item in payload["movements"]]

        validation = validate_movement_batch(movements, logger=self._logger)

        account_count, instrument_count, movement_count = self._store.restore(
            accounts,
            instruments,
            validation.valid,
        )
        self._logger.info(
            f"Imported backup: {account_count} accounts, "
            f"{instrument_count} instruments, {movement_count} movements, "
            f"{len(validation.rejected)} rejected"
        )
        return ImportBackupResult(
            accounts=account_count,
            instruments=instrument_count,
            movements=movement_count,
            rejected=validation.rejected,
        )


def account_to_dict(account: Account) -> dict[str, Any]:
    """Serialize an account to JSON-compatible values."""
    cash_yield = None
    if account.cash_yield is not None:
        config = account.cash_yield
        cash_yield = {
            "enabled": config.enabled,
            "tna": str(config.tna),
            "currency": config.currency,
            "compounding": config.compounding,
            "last_accrued_date": (
                config.last_accrued_date.isoformat()
                if config.last_accrued_date
                else None
            ),
        }
    return {
        "id": account.id,
        "name": account.name,
        "kind": account.kind,
        "default_currency": account.default_currency,
        "cash_yield": cash_yield,
    }


def instrument_to_dict(instrument: Instrument) -> dict[str, Any]:
    """Serialize an instrument to JSON-compatible values."""
    return {
        item.name: getattr(instrument, item.name)
        for item in fields(instrument)
    }


def movement_to_dict(movement: Movement) -> dict[str, Any]:
    """Serialize a movement, writing Decimals as strings."""
    data: dict[str, Any] = {}
    for item in fields(movement):
        value = getattr(movement, item.name)
        data[item.name] = str(value) if isinstance(value, Decimal) else value
    return data


def account_from_dict(data: Any) -> Account:
    """Parse an account record.

    Raises:
        BackupFormatError: If required keys are missing.
    """
    record = _require_mapping(data, "account")
    cash_yield = None
    raw_yield = record.get("cash_yield")
    if raw_yield is not None:
        config = _require_mapping(raw_yield, "cash_yield")
        tna = coerce_optional_decimal(config.get("tna"))
        if tna is None:
            raise BackupFormatError(
                f"Account {record.get('id')} has an invalid tna"
            )
        cash_yield = CashYieldConfig(
            enabled=bool(config.get("enabled", False)),
            tna=tna,
            currency=config.get("currency") or "ARS",
            compounding=config.get("compounding") or "DAILY",
            last_accrued_date=_parse_date(config.get("last_accrued_date")),
        )
    return Account(
        id=_require(record, "id", "account"),
        name=_require(record, "name", "account"),
        kind=record.get("kind") or "BROKER",
        default_currency=record.get("default_currency") or "ARS",
        cash_yield=cash_yield,
    )


def instrument_from_dict(data: Any) -> Instrument:
    """Parse an instrument record.

    Raises:
        BackupFormatError: If required keys are missing.
    """
    record = _require_mapping(data, "instrument")
    return Instrument(
        id=_require(record, "id", "instrument"),
        symbol=normalize_symbol(_require(record, "symbol", "instrument")),
        name=record.get("name") or record["symbol"],
        category=_require(record, "category", "instrument"),
        native_currency=normalize_currency(
            _require(record, "native_currency", "instrument")
        ),
    )


def movement_from_dict(data: Any) -> Movement:
    """Parse a movement record, reading Decimals from strings.

    Raises:
        BackupFormatError: If required keys are missing.
    """
    record = _require_mapping(data, "movement")
    decimals = {
        name: coerce_optional_decimal(record.get(name))
        for name in MOVEMENT_DECIMAL_FIELDS
    }
    return Movement(
        id=_require(record, "id", "movement"),
        account_id=_require(record, "account_id", "movement"),
        type=_require(record, "type", "movement"),
        datetime_iso=_require(record, "datetime_iso", "movement"),
        trade_currency=normalize_currency(
            _require(record, "trade_currency", "movement")
        ),
        instrument_id=record.get("instrument_id"),
        fee_currency=normalize_currency(record.get("fee_currency")),
        notes=record.get("notes"),
        **decimals,
    )


def _load_payload(raw_json: str) -> dict[str, Any]:
    try:
        payload = json.loads(raw_json)
    except (TypeError, ValueError) as exc:
        raise BackupFormatError(f"Backup is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise BackupFormatError("Backup root must be an object")
    version = payload.get("version")
    if version != BACKUP_VERSION:
        raise BackupFormatError(f"Unsupported backup version: {version!r}")
    for key in ("accounts", "instruments", "movements"):
        if not isinstance(payload.get(key, []), list):
            raise BackupFormatError(f"Backup key {key!r} must be a list")
        payload.setdefault(key, [])
    return payload


def _require_mapping(data: Any, kind: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise BackupFormatError(f"Each {kind} must be an object")
    return data


def _require(record: dict[str, Any], key: str, kind: str) -> str:
    value = record.get(key)
    if value is None or value == "":
        raise BackupFormatError(f"Missing {key!r} in {kind} record")
    return str(value)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise BackupFormatError(f"Invalid date {value!r}") from exc


__all__ = [
    "BACKUP_VERSION",
    "ExportBackupUseCase",
    "ImportBackupUseCase",
    "ImportBackupResult",
    "account_to_dict",
    "instrument_to_dict",
    "movement_to_dict",
    "account_from_dict",
    "instrument_from_dict",
    "movement_from_dict",
]
