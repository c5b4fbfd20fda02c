"""Domain services package."""

from .cash_ledger import cash_deltas, compute_cash_balances
from .fifo import build_fifo_lots
from .formatting import format_amount, format_percent
from .fx import (
    build_fx_quote,
    effective_rate,
    fx_mid,
    reference_rates,
    to_ars_from_usd,
    to_usd_from_ars,
)
from .lot_allocation import allocate_sale
from .normalization import normalize_currency, normalize_fx_key, normalize_symbol
from .validation import validate_movement, validate_movement_batch
from .valuation import (
    CATEGORY_VALUATION,
    compute_asset_metrics,
    compute_category_breakdown,
    compute_portfolio_totals,
    resolve_fx_key,
)
from .yields import (
    accrual_movement_id,
    compute_tea,
    compute_yield_metrics,
    generate_accrual_movements,
)

__all__ = [
    "cash_deltas",
    "compute_cash_balances",
    "build_fifo_lots",
    "format_amount",
    "format_percent",
    "build_fx_quote",
    "effective_rate",
    "fx_mid",
    "reference_rates",
    "to_ars_from_usd",
    "to_usd_from_ars",
    "allocate_sale",
    "normalize_currency",
    "normalize_fx_key",
    "normalize_symbol",
    "validate_movement",
    "validate_movement_batch",
    "CATEGORY_VALUATION",
    "compute_asset_metrics",
    "compute_category_breakdown",
    "compute_portfolio_totals",
    "resolve_fx_key",
    "accrual_movement_id",
    "compute_tea",
    "compute_yield_metrics",
    "generate_accrual_movements",
]
