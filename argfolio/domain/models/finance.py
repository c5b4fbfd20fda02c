"""Domain models for valuation and yield aggregates."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from .lots import OversellWarning
from .movements import Movement


@dataclass(frozen=True)
class AssetRowMetrics:
    """Valuation of one (instrument, account) position.

    Figures in the non-primary currency are derived from the primary ones
    at the current FX rate.
    """

    instrument_id: str
    account_id: str
    symbol: str
    category: str
    primary_currency: str
    quantity: Decimal
    avg_cost_native: Decimal | None
    avg_cost_usd_eq: Decimal | None
    invested_ars: Decimal | None
    cost_usd_eq: Decimal | None
    current_price: Decimal | None
    val_ars: Decimal | None
    val_usd: Decimal | None
    pnl_ars: Decimal | None
    pnl_usd: Decimal | None
    pnl_pct: Decimal | None
    change_pct_1d: Decimal | None
    change_ars_1d: Decimal | None
    fx_key: str
    fx_rate: Decimal | None

    @property
    def roi_pct(self) -> Decimal | None:
        """Return the return on investment ratio."""
        return self.pnl_pct


@dataclass(frozen=True)
class PortfolioTotals:
    """Sum of asset rows in both currencies."""

    total_ars: Decimal
    total_usd: Decimal
    cost_ars: Decimal
    cost_usd: Decimal
    pnl_ars: Decimal
    pnl_usd: Decimal
    pnl_pct: Decimal | None


@dataclass(frozen=True)
class CategoryTotal:
    """Value and PnL aggregated for an asset category."""

    category: str
    total_ars: Decimal
    total_usd: Decimal
    pnl_ars: Decimal
    pnl_usd: Decimal
    row_count: int


@dataclass(frozen=True)
class AssetRowsView:
    """Asset rows with portfolio and category totals."""

    rows: list[AssetRowMetrics]
    totals: PortfolioTotals
    categories: list[CategoryTotal]
    warnings: list[OversellWarning] = field(default_factory=list)


@dataclass(frozen=True)
class YieldMetrics:
    """Interest projections for a remunerated cash balance."""

    daily_rate: Decimal
    tea: Decimal
    interest_tomorrow: Decimal
    proj_30d: Decimal
    proj_1y: Decimal


@dataclass(frozen=True)
class AccrualResult:
    """Synthetic interest movements and the advanced watermark."""

    movements: list[Movement]
    new_last_accrued_date: date | None

    @property
    def total_interest(self) -> Decimal:
        return sum(
            (movement.quantity or Decimal("0") for movement in self.movements),
            Decimal("0"),
        )


__all__ = [
    "AssetRowMetrics",
    "PortfolioTotals",
    "CategoryTotal",
    "AssetRowsView",
    "YieldMetrics",
    "AccrualResult",
]
