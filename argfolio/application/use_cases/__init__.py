"""Application use cases package."""

from .accrue_interest import AccrueInterestUseCase
from .backup import (
    ExportBackupUseCase,
    ImportBackupResult,
    ImportBackupUseCase,
)
from .get_asset_rows import GetAssetRowsUseCase
from .get_inventory_lots import GetInventoryLotsUseCase
from .get_yield_summary import GetYieldSummaryUseCase, YieldSummary
from .preview_sale import PreviewSaleUseCase

__all__ = [
    "AccrueInterestUseCase",
    "ExportBackupUseCase",
    "ImportBackupResult",
    "ImportBackupUseCase",
    "GetAssetRowsUseCase",
    "GetInventoryLotsUseCase",
    "GetYieldSummaryUseCase",
    "YieldSummary",
    "PreviewSaleUseCase",
]
