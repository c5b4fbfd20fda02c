"""Application ports package."""

from .accounts_repository import AccountsRepositoryPort
from .backup_store import BackupStorePort
from .database import DatabaseEnginePort
from .instruments_repository import InstrumentsRepositoryPort
from .market_data import FxFeedPort, PriceFeedPort
from .movements_repository import MovementsRepositoryPort

__all__ = [
    "AccountsRepositoryPort",
    "BackupStorePort",
    "DatabaseEnginePort",
    "InstrumentsRepositoryPort",
    "FxFeedPort",
    "PriceFeedPort",
    "MovementsRepositoryPort",
]
