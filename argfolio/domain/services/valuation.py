"""Valuation and PnL for asset positions in ARS and USD."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from logging import Logger

from argfolio.domain.models import (
    AssetRowMetrics,
    CategoryTotal,
    FifoResult,
    FxRates,
    Instrument,
    PortfolioTotals,
    PriceQuote,
)
from argfolio.domain.services.fx import (
    effective_rate,
    to_ars_from_usd,
    to_usd_from_ars,
)
from argfolio.utils.decimal_utils import safe_ratio


@dataclass(frozen=True)
class CategoryValuation:
    """Valuation strategy for an asset category.

    Attributes:
        primary_currency: Currency the position is priced and costed in.
        fx_preference: ``base`` for the user's MEP/CCL choice, ``stable``
            for the stablecoin rate.
        quantity_is_value: Whether the quantity already is the value.
    """

    primary_currency: str
    fx_preference: str
    quantity_is_value: bool = False


CATEGORY_VALUATION: dict[str, CategoryValuation] = {
    "CEDEAR": CategoryValuation("ARS", "base"),
    "FCI": CategoryValuation("ARS", "base"),
    "CASH_ARS": CategoryValuation("ARS", "base", quantity_is_value=True),
    "CASH_USD": CategoryValuation("USD", "base", quantity_is_value=True),
    "CRYPTO": CategoryValuation("USD", "stable"),
    "STABLE": CategoryValuation("USD", "stable"),
}


def resolve_category_valuation(instrument: Instrument) -> CategoryValuation:
    """Return the valuation strategy for an instrument.

    Unknown categories are valued in the instrument's native currency with
    the base FX.
    """
    strategy = CATEGORY_VALUATION.get(instrument.category)
    if strategy is not None:
        return strategy
    primary = "ARS" if instrument.native_currency == "ARS" else "USD"
    return CategoryValuation(primary, "base")


def resolve_fx_key(
    instrument: Instrument,
    base_fx: str = "mep",
    stable_fx: str = "cripto",
) -> str:
    """Return the FX market used to value an instrument."""
    strategy = resolve_category_valuation(instrument)
    return stable_fx if strategy.fx_preference == "stable" else base_fx


def compute_asset_metrics(
    instrument: Instrument,
    account_id: str,
    position: FifoResult,
    price: PriceQuote | None,
    fx_rates: FxRates,
    *,
    base_fx: str = "mep",
    stable_fx: str = "cripto",
) -> AssetRowMetrics:
    """Compute valuation metrics for a single position.

    Args:
        instrument: Instrument held.
        account_id: Account holding the position.
        position: FIFO lots of the position.
        price: Live price in the instrument's native currency.
        fx_rates: Current FX snapshot.
        base_fx: FX key for ARS-primary and USD cash assets (mep or ccl).
        stable_fx: FX key for crypto and stablecoins.

    Returns:
        AssetRowMetrics: Value, cost and PnL in both currencies.
    """
    strategy = resolve_category_valuation(instrument)
    fx_key = resolve_fx_key(instrument, base_fx, stable_fx)
    quote = fx_rates.get(fx_key)
    primary = strategy.primary_currency

    quantity = position.total_quantity
    invested_ars = position.total_cost_ars
    cost_usd_eq = position.total_cost_usd

    if strategy.quantity_is_value:
        current_price = Decimal("1")
    else:
        current_price = price.price_native if price is not None else None
    val_native = quantity * current_price if current_price is not None else None

    if primary == "ARS":
        invested_native = invested_ars
        avg_cost_native = position.avg_cost_ars
        val_ars = val_native
        pnl_ars = _difference(val_ars, invested_ars)
        val_usd = to_usd_from_ars(val_ars, quote)
        pnl_usd = to_usd_from_ars(pnl_ars, quote)
        pnl_native = pnl_ars
    else:
        invested_native = cost_usd_eq
        avg_cost_native = position.avg_cost_usd
        val_usd = val_native
        pnl_usd = _difference(val_usd, cost_usd_eq)
        val_ars = to_ars_from_usd(val_usd, quote)
        pnl_ars = to_ars_from_usd(pnl_usd, quote)
        pnl_native = pnl_usd

    change_pct = price.change_pct_1d if price is not None else None

    return AssetRowMetrics(
        instrument_id=instrument.id,
        account_id=account_id,
        symbol=instrument.symbol,
        category=instrument.category,
        primary_currency=primary,
        quantity=quantity,
        avg_cost_native=avg_cost_native,
        avg_cost_usd_eq=position.avg_cost_usd,
        invested_ars=invested_ars,
        cost_usd_eq=cost_usd_eq,
        current_price=current_price,
        val_ars=val_ars,
        val_usd=val_usd,
        pnl_ars=pnl_ars,
        pnl_usd=pnl_usd,
        pnl_pct=safe_ratio(pnl_native, invested_native),
        change_pct_1d=change_pct,
        change_ars_1d=_daily_change(val_ars, change_pct),
        fx_key=fx_key,
        fx_rate=effective_rate(quote, primary),
    )


def compute_portfolio_totals(
    rows: Iterable[AssetRowMetrics],
) -> PortfolioTotals:
    """Sum asset rows, skipping figures that could not be valued.

    The PnL percentage only uses rows with both an ARS cost and an ARS
    PnL, so unpriced positions do not dilute it.

    Args:
        rows: Asset rows to aggregate.

    Returns:
        PortfolioTotals: Value, cost and PnL in both currencies.
    """
    total_ars = Decimal("0")
    total_usd = Decimal("0")
    cost_ars = Decimal("0")
    cost_usd = Decimal("0")
    pnl_ars = Decimal("0")
    pnl_usd = Decimal("0")
    matched_pnl_ars = Decimal("0")
    matched_cost_ars = Decimal("0")
    for row in rows:
        total_ars += _or_zero(row.val_ars)
        total_usd += _or_zero(row.val_usd)
        cost_ars += _or_zero(row.invested_ars)
        cost_usd += _or_zero(row.cost_usd_eq)
        pnl_ars += _or_zero(row.pnl_ars)
        pnl_usd += _or_zero(row.pnl_usd)
        if row.pnl_ars is not None and row.invested_ars is not None:
            matched_pnl_ars += row.pnl_ars
            matched_cost_ars += row.invested_ars
    return PortfolioTotals(
        total_ars=total_ars,
        total_usd=total_usd,
        cost_ars=cost_ars,
        cost_usd=cost_usd,
        pnl_ars=pnl_ars,
        pnl_usd=pnl_usd,
        pnl_pct=safe_ratio(matched_pnl_ars, matched_cost_ars),
    )


def compute_category_breakdown(
    rows: Iterable[AssetRowMetrics],
    logger: Logger | None = None,
) -> list[CategoryTotal]:
    """Aggregate asset rows by category.

    Args:
        rows: Asset rows to aggregate.
        logger: Optional logger used for unvalued rows.

    Returns:
        list[CategoryTotal]: Totals sorted by category name.
    """
    totals: dict[str, list] = {}
    for row in rows:
        if row.val_ars is None and logger is not None:
            logger.warning(
                f"Missing ARS value for {row.symbol} in {row.account_id}"
            )
        bucket = totals.setdefault(
            row.category,
            [Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0"), 0],
        )
        bucket[0] += _or_zero(row.val_ars)
        bucket[1] += _or_zero(row.val_usd)
        bucket[2] += _or_zero(row.pnl_ars)
        bucket[3] += _or_zero(row.pnl_usd)
        bucket[4] += 1

    return [
        CategoryTotal(
            category=category,
            total_ars=bucket[0],
            total_usd=bucket[1],
            pnl_ars=bucket[2],
            pnl_usd=bucket[3],
            row_count=bucket[4],
        )
        for category, bucket in sorted(totals.items())
    ]


def _difference(
    value: Decimal | None,
    basis: Decimal | None,
) -> Decimal | None:
    if value is None or basis is None:
        return None
    return value - basis


def _daily_change(
    val_ars: Decimal | None,
    change_pct: Decimal | None,
) -> Decimal | None:
    if val_ars is None or change_pct is None or change_pct == -1:
        return None
    previous = val_ars / (1 + change_pct)
    return val_ars - previous


def _or_zero(value: Decimal | None) -> Decimal:
    return value if value is not None else Decimal("0")


__all__ = [
    "CategoryValuation",
    "CATEGORY_VALUATION",
    "resolve_category_valuation",
    "resolve_fx_key",
    "compute_asset_metrics",
    "compute_portfolio_totals",
    "compute_category_breakdown",
]
