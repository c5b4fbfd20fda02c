"""Composition root for wiring infrastructure adapters."""

from argfolio.application.ports.accounts_repository import (
    AccountsRepositoryPort,
)
from argfolio.application.ports.backup_store import BackupStorePort
from argfolio.application.ports.database import DatabaseEnginePort
from argfolio.application.ports.instruments_repository import (
    InstrumentsRepositoryPort,
)
from argfolio.application.ports.market_data import FxFeedPort, PriceFeedPort
from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.application.use_cases.preview_sale import PreviewSaleUseCase
from argfolio.infrastructure.accounts_repository import (
    SqlAlchemyAccountsRepository,
)
from argfolio.infrastructure.backup_store import SqlAlchemyBackupStore
from argfolio.infrastructure.cache import CachedMovementsRepository, QueryCache
from argfolio.infrastructure.db import (
    SqlAlchemyDatabaseEngineAdapter,
    ensure_schema,
)
from argfolio.infrastructure.instruments_repository import (
    SqlAlchemyInstrumentsRepository,
)
from argfolio.infrastructure.logging.logger import get_app_logger
from argfolio.infrastructure.market_data import (
    CoinGeckoPriceProvider,
    DolarApiFxProvider,
)
from argfolio.infrastructure.movements_repository import (
    SqlAlchemyMovementsRepository,
)
from argfolio.infrastructure.settings import ArgfolioSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter with its tables created."""
    adapter = SqlAlchemyDatabaseEngineAdapter()
    ensure_schema(adapter)
    return adapter


def build_movements_repository(
    db_port: DatabaseEnginePort | None = None,
    cache: QueryCache | None = None,
) -> MovementsRepositoryPort:
    """Return the cached movements repository."""
    resolved_db = db_port or build_database_adapter()
    return CachedMovementsRepository(
        SqlAlchemyMovementsRepository(resolved_db),
        cache=cache,
    )


def build_accounts_repository(
    db_port: DatabaseEnginePort | None = None,
) -> AccountsRepositoryPort:
    """Return the accounts repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyAccountsRepository(resolved_db)


def build_instruments_repository(
    db_port: DatabaseEnginePort | None = None,
) -> InstrumentsRepositoryPort:
    """Return the instruments repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyInstrumentsRepository(resolved_db)


def build_backup_store(
    db_port: DatabaseEnginePort | None = None,
    cache: QueryCache | None = None,
) -> BackupStorePort:
    """Return the store restoring backups in one transaction."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyBackupStore(resolved_db, cache=cache)


def build_preview_sale_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ArgfolioSettings | None = None,
) -> PreviewSaleUseCase:
    """Return the sale preview using the configured costing method."""
    resolved = settings or ArgfolioSettings.from_env()
    return PreviewSaleUseCase(
        build_movements_repository(db_port),
        logger=get_app_logger(),
        default_method=resolved.costing_method,
    )


def build_fx_feed(settings: ArgfolioSettings | None = None) -> FxFeedPort:
    """Return the FX feed."""
    resolved = settings or ArgfolioSettings.from_env()
    return DolarApiFxProvider(
        timeout=resolved.http_timeout,
        logger=get_app_logger(),
    )


def build_price_feed(settings: ArgfolioSettings | None = None) -> PriceFeedPort:
    """Return the crypto price feed."""
    resolved = settings or ArgfolioSettings.from_env()
    return CoinGeckoPriceProvider(
        timeout=resolved.http_timeout,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_movements_repository",
    "build_accounts_repository",
    "build_instruments_repository",
    "build_backup_store",
    "build_preview_sale_use_case",
    "build_fx_feed",
    "build_price_feed",
]
