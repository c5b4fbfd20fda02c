"""Domain models package."""

from .accounts import Account, CashYieldConfig, Instrument
from .finance import (
    AccrualResult,
    AssetRowMetrics,
    AssetRowsView,
    CategoryTotal,
    PortfolioTotals,
    YieldMetrics,
)
from .lots import (
    AllocationEntry,
    FifoResult,
    InventoryLot,
    ManualAllocation,
    OversellWarning,
    SaleAllocation,
)
from .market import FxQuote, FxRates, PriceQuote
from .movements import Movement, movement_sort_key

__all__ = [
    "Account",
    "CashYieldConfig",
    "Instrument",
    "Movement",
    "movement_sort_key",
    "InventoryLot",
    "OversellWarning",
    "FifoResult",
    "AllocationEntry",
    "ManualAllocation",
    "SaleAllocation",
    "FxQuote",
    "FxRates",
    "PriceQuote",
    "AssetRowMetrics",
    "PortfolioTotals",
    "CategoryTotal",
    "AssetRowsView",
    "YieldMetrics",
    "AccrualResult",
]
