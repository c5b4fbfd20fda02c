"""Tests for the SQLAlchemy repositories against in-memory SQLite."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from argfolio.application.use_cases.accrue_interest import (
    AccrueInterestUseCase,
)
from argfolio.application.use_cases.backup import (
    ExportBackupUseCase,
    ImportBackupUseCase,
)
from argfolio.domain.models import (
    Account,
    CashYieldConfig,
    Instrument,
    Movement,
)
from argfolio.infrastructure import backup_store as backup_store_module
from argfolio.infrastructure import movements_repository as movements_module
from argfolio.infrastructure.accounts_repository import (
    SqlAlchemyAccountsRepository,
)
from argfolio.infrastructure.backup_store import SqlAlchemyBackupStore
from argfolio.infrastructure.db import (
    SqlAlchemyDatabaseEngineAdapter,
    ensure_schema,
)
from argfolio.infrastructure.instruments_repository import (
    SqlAlchemyInstrumentsRepository,
)
from argfolio.infrastructure.movements_repository import (
    SqlAlchemyMovementsRepository,
)


def _memory_port() -> SqlAlchemyDatabaseEngineAdapter:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    adapter = SqlAlchemyDatabaseEngineAdapter(engine)
    ensure_schema(adapter)
    return adapter


@pytest.fixture
def db_port():
    """Database port over a fresh in-memory SQLite database."""
    adapter = _memory_port()
    yield adapter
    adapter.get_engine().dispose()


def _wallet(last_accrued: date | None = date(2024, 1, 1)) -> Account:
    return Account(
        id="wallet",
        name="Billetera",
        kind="WALLET",
        default_currency="ARS",
        cash_yield=CashYieldConfig(
            enabled=True,
            tna=Decimal("36.5"),
            last_accrued_date=last_accrued,
        ),
    )


def _buy(movement_id: str, when: str, quantity: str) -> Movement:
    return Movement(
        id=movement_id,
        account_id="broker",
        type="BUY",
        datetime_iso=when,
        trade_currency="ARS",
        instrument_id="ggal",
        quantity=Decimal(quantity),
        unit_price=Decimal("1234.567890123"),
        fx_at_trade=Decimal("1015.25"),
    )


def test_accounts_round_trip_with_yield_config(db_port) -> None:
    """Accounts keep their yield settings through the database."""
    repo = SqlAlchemyAccountsRepository(db_port)
    broker = Account("broker", "Broker", "BROKER", "ARS")

    assert repo.upsert_accounts([_wallet(), broker]) == 2

    assert repo.fetch_account("wallet") == _wallet()
    assert repo.fetch_account("broker") == broker
    assert repo.fetch_account("missing") is None
    assert [a.id for a in repo.fetch_accounts()] == ["wallet", "broker"]


def test_watermark_only_moves_forward(db_port) -> None:
    """Older dates never overwrite a newer watermark."""
    repo = SqlAlchemyAccountsRepository(db_port)
    repo.upsert_accounts([_wallet()])

    repo.update_last_accrued_date("wallet", date(2024, 1, 10))
    repo.update_last_accrued_date("wallet", date(2024, 1, 5))

    config = repo.fetch_account("wallet").cash_yield
    assert config.last_accrued_date == date(2024, 1, 10)


def test_instruments_upsert_replaces_by_id(db_port) -> None:
    """Upserting an existing id updates it in place."""
    repo = SqlAlchemyInstrumentsRepository(db_port)
    repo.upsert_instruments(
        [Instrument("ggal", "GGAL", "Galicia", "CEDEAR", "ARS")]
    )
    repo.upsert_instruments(
        [Instrument("ggal", "GGAL", "Grupo Galicia", "CEDEAR", "ARS")]
    )

    instruments = repo.fetch_instruments()

    assert len(instruments) == 1
    assert repo.fetch_instrument("ggal").name == "Grupo Galicia"
    assert repo.fetch_instrument("missing") is None


def test_movements_keep_exact_decimals_and_order(db_port) -> None:
    """Movements are read back exactly in (datetime, id) order."""
    repo = SqlAlchemyMovementsRepository(db_port)
    later = _buy("b2", "2024-01-02T10:00:00", "3")
    earlier = _buy("b1", "2024-01-01T10:00:00", "0.00000001")

    repo.upsert_movements([later, earlier])
    repo.upsert_movements([later])

    assert repo.fetch_all_movements() == [earlier, later]
    assert repo.fetch_movements("ggal", "broker") == [earlier, later]
    assert repo.fetch_movements("ggal", "other") == []
    assert repo.fetch_account_movements("broker") == [earlier, later]
    assert repo.upsert_movements([]) == 0


def test_record_accrual_is_idempotent(db_port) -> None:
    """Re-running the accrual for the same day adds nothing."""
    accounts = SqlAlchemyAccountsRepository(db_port)
    movements = SqlAlchemyMovementsRepository(db_port)
    accounts.upsert_accounts([_wallet()])
    movements.upsert_movements(
        [
            Movement(
                id="dep",
                account_id="wallet",
                type="DEPOSIT",
                datetime_iso="2023-12-31T12:00:00",
                trade_currency="ARS",
                total_amount=Decimal("1000000"),
            )
        ]
    )
    use_case = AccrueInterestUseCase(
        accounts,
        movements,
        logger=MagicMock(),
    )

    first = use_case.execute("wallet", date(2024, 1, 4))
    second = use_case.execute("wallet", date(2024, 1, 4))

    stored = movements.fetch_account_movements("wallet")
    assert len(first.movements) == 2
    assert second.movements == []
    assert [m.id for m in stored] == [
        "dep",
        "yield-wallet-2024-01-02",
        "yield-wallet-2024-01-03",
    ]
    assert stored[1].quantity == Decimal("1000")
    assert accounts.fetch_account("wallet").cash_yield.last_accrued_date == (
        date(2024, 1, 3)
    )


def _cash_dividend() -> Movement:
    return Movement(
        id="d1",
        account_id="broker",
        type="DIVIDEND",
        datetime_iso="2024-01-03T10:00:00Z",
        trade_currency="ARS",
        instrument_id="ggal",
        total_amount=Decimal("50"),
    )


def _seed(db_port) -> None:
    SqlAlchemyAccountsRepository(db_port).upsert_accounts([_wallet()])
    SqlAlchemyInstrumentsRepository(db_port).upsert_instruments(
        [Instrument("ggal", "GGAL", "Galicia", "CEDEAR", "ARS")]
    )
    SqlAlchemyMovementsRepository(db_port).upsert_movements(
        [
            _buy("b1", "2024-01-01T10:00:00", "1"),
            _buy("b2", "2024-01-02T10:00:00", "2"),
            _cash_dividend(),
        ]
    )


def _snapshot(db_port):
    return (
        SqlAlchemyAccountsRepository(db_port).fetch_accounts(),
        SqlAlchemyInstrumentsRepository(db_port).fetch_instruments(),
        SqlAlchemyMovementsRepository(db_port).fetch_all_movements(),
    )


def _export(db_port) -> str:
    return ExportBackupUseCase(
        SqlAlchemyAccountsRepository(db_port),
        SqlAlchemyInstrumentsRepository(db_port),
        SqlAlchemyMovementsRepository(db_port),
        logger=MagicMock(),
    ).execute()


def _import(db_port, raw_json: str):
    return ImportBackupUseCase(
        SqlAlchemyBackupStore(db_port),
        logger=MagicMock(),
    ).execute(raw_json)


def test_backup_round_trip_reproduces_the_same_records(db_port) -> None:
    """Export then import on the same store leaves no duplicates."""
    _seed(db_port)
    before = _snapshot(db_port)

    result = _import(db_port, _export(db_port))

    assert result.rejected == []
    assert _snapshot(db_port) == before


def test_backup_restores_cash_dividend_into_empty_store(db_port) -> None:
    """Every stored movement, cash dividends included, is restored."""
    _seed(db_port)
    target = _memory_port()

    result = _import(target, _export(db_port))

    assert result.movements == 3
    assert _snapshot(target) == _snapshot(db_port)
    assert {m.id for m in _snapshot(target)[2]} == {"b1", "b2", "d1"}


def test_importing_old_backup_keeps_newer_watermark(db_port) -> None:
    """An older backup never moves the accrual watermark backwards."""
    accounts = SqlAlchemyAccountsRepository(db_port)
    accounts.upsert_accounts([_wallet(date(2024, 1, 1))])
    old_backup = _export(db_port)
    accounts.update_last_accrued_date("wallet", date(2024, 3, 1))

    _import(db_port, old_backup)
    accounts.upsert_accounts([_wallet(None)])

    config = accounts.fetch_account("wallet").cash_yield
    assert config.last_accrued_date == date(2024, 3, 1)


def test_upsert_accounts_moves_watermark_forward(db_port) -> None:
    """A newer watermark in an upsert is kept."""
    accounts = SqlAlchemyAccountsRepository(db_port)
    accounts.upsert_accounts([_wallet(None)])

    accounts.upsert_accounts([_wallet(date(2024, 2, 1))])

    config = accounts.fetch_account("wallet").cash_yield
    assert config.last_accrued_date == date(2024, 2, 1)


def test_record_accrual_rolls_back_movements_when_watermark_fails(
    db_port,
    monkeypatch,
) -> None:
    """Movements and watermark are written together or not at all."""
    accounts = SqlAlchemyAccountsRepository(db_port)
    movements = SqlAlchemyMovementsRepository(db_port)
    accounts.upsert_accounts([_wallet()])
    interest = Movement(
        id="yield-wallet-2024-01-02",
        account_id="wallet",
        type="INTEREST",
        datetime_iso="2024-01-02T00:01:00",
        trade_currency="ARS",
        quantity=Decimal("1000"),
        unit_price=Decimal("1"),
        total_amount=Decimal("1000"),
    )
    monkeypatch.setattr(
        movements_module,
        "ADVANCE_WATERMARK_SQL",
        text(
            "UPDATE missing_table SET last_accrued_date = :accrued_through "
            "WHERE id = :account_id"
        ),
    )

    with pytest.raises(OperationalError):
        movements.record_accrual("wallet", [interest], date(2024, 1, 2))

    assert movements.fetch_account_movements("wallet") == []
    config = accounts.fetch_account("wallet").cash_yield
    assert config.last_accrued_date == date(2024, 1, 1)


def test_backup_restore_is_all_or_nothing(db_port, monkeypatch) -> None:
    """A failing movement upsert leaves accounts and instruments untouched."""
    monkeypatch.setattr(
        backup_store_module,
        "UPSERT_MOVEMENT_SQL",
        text("INSERT INTO missing_table (id) VALUES (:id)"),
    )
    store = SqlAlchemyBackupStore(db_port)

    with pytest.raises(OperationalError):
        store.restore(
            [_wallet()],
            [Instrument("ggal", "GGAL", "Galicia", "CEDEAR", "ARS")],
            [_buy("b1", "2024-01-01T10:00:00", "1")],
        )

    assert _snapshot(db_port) == ([], [], [])
