"""Domain package for portfolio accounting rules and core models."""

from .errors import (
    ArgfolioError,
    BackupFormatError,
    MalformedMovementError,
    MarketDataError,
)
from .models import (
    Account,
    CashYieldConfig,
    FifoResult,
    FxQuote,
    FxRates,
    Instrument,
    InventoryLot,
    Movement,
    OversellWarning,
    PriceQuote,
)
from .services import (
    build_fifo_lots,
    compute_asset_metrics,
    compute_yield_metrics,
    generate_accrual_movements,
)

__all__ = [
    "ArgfolioError",
    "BackupFormatError",
    "MalformedMovementError",
    "MarketDataError",
    "Account",
    "CashYieldConfig",
    "FifoResult",
    "FxQuote",
    "FxRates",
    "Instrument",
    "InventoryLot",
    "Movement",
    "OversellWarning",
    "PriceQuote",
    "build_fifo_lots",
    "compute_asset_metrics",
    "compute_yield_metrics",
    "generate_accrual_movements",
]
