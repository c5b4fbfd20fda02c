"""CLI adapter printing valued asset rows with live FX and prices.

Crypto and stablecoin prices come from CoinGecko. CEDEAR and FCI prices
can be passed with ``--price SYMBOL=VALUE``; rows without a price show
their cost basis with missing values rendered as a dash.
"""

import argparse
from decimal import Decimal, InvalidOperation

from argfolio.application.use_cases.get_asset_rows import GetAssetRowsUseCase
from argfolio.application.use_cases.get_yield_summary import (
    GetYieldSummaryUseCase,
)
from argfolio.domain.models import AssetRowsView, PriceQuote
from argfolio.domain.services.formatting import format_amount, format_percent
from argfolio.domain.services.normalization import (
    normalize_fx_key,
    normalize_symbol,
)
from argfolio.infrastructure.container import (
    build_accounts_repository,
    build_database_adapter,
    build_fx_feed,
    build_instruments_repository,
    build_movements_repository,
    build_price_feed,
)
from argfolio.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from argfolio.infrastructure.settings import ArgfolioSettings


LIVE_PRICE_CATEGORIES = ("CRYPTO", "STABLE")


def parse_price(raw: str) -> tuple[str, PriceQuote]:
    """Parse a ``SYMBOL=VALUE`` manual price.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed.
    """
    symbol, sep, value = raw.partition("=")
    if not sep or not symbol.strip():
        raise argparse.ArgumentTypeError(f"Expected SYMBOL=VALUE, got {raw!r}")
    try:
        price = Decimal(value.strip())
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Invalid price {value!r}") from exc
    ticker = normalize_symbol(symbol)
    return ticker, PriceQuote(ticker=ticker, price_native=price)


def build_parser(settings: ArgfolioSettings) -> argparse.ArgumentParser:
    """Return the argument parser of the report command."""
    parser = argparse.ArgumentParser(
        description="Print portfolio positions valued in ARS and USD"
    )
    parser.add_argument(
        "--base-fx",
        choices=["mep", "ccl"],
        default=settings.base_fx,
        help="Dollar market for CEDEARs, FCIs and cash",
    )
    parser.add_argument(
        "--stable-fx",
        default=settings.stable_fx,
        help="Dollar market for crypto and stablecoins",
    )
    parser.add_argument(
        "--reference-fx",
        default=None,
        help="Dollar market used for trades recorded without an FX rate",
    )
    parser.add_argument(
        "--price",
        action="append",
        type=parse_price,
        default=[],
        metavar="SYMBOL=VALUE",
        help="Manual price in the instrument's native currency",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Fetch market data, value every position and print the report."""
    settings = ArgfolioSettings.from_env()
    args = build_parser(settings).parse_args(argv)
    get_usage_logger().info(
        f"argfolio-report base_fx={args.base_fx} stable_fx={args.stable_fx}"
    )

    logger = get_app_logger()
    db_adapter = build_database_adapter()
    movements = build_movements_repository(db_adapter)
    instruments = build_instruments_repository(db_adapter)
    accounts = build_accounts_repository(db_adapter)

    fx_rates = build_fx_feed(settings).fetch_fx_rates()
    live_symbols = [
        instrument.symbol
        for instrument in instruments.fetch_instruments()
        if instrument.category in LIVE_PRICE_CATEGORIES
    ]
    prices = (
        build_price_feed(settings).fetch_prices(live_symbols)
        if live_symbols
        else {}
    )
    prices.update(dict(args.price))

    view = GetAssetRowsUseCase(
        movements_repository=movements,
        instruments_repository=instruments,
        logger=logger,
    ).execute(
        fx_rates,
        prices,
        base_fx=args.base_fx,
        stable_fx=normalize_fx_key(args.stable_fx, settings.stable_fx),
        reference_fx_key=(
            normalize_fx_key(args.reference_fx, settings.base_fx)
            if args.reference_fx
            else None
        ),
    )
    print_view(view)

    yield_use_case = GetYieldSummaryUseCase(
        accounts_repository=accounts,
        movements_repository=movements,
        logger=logger,
    )
    for account in accounts.fetch_accounts():
        if account.cash_yield is None or not account.cash_yield.enabled:
            continue
        summary = yield_use_case.execute(account.id)
        if summary is None:
            continue
        print(
            f"Yield {account.name}: balance "
            f"{format_amount(summary.balance, summary.currency)}, "
            f"TNA {summary.tna}%, TEA {format_percent(summary.metrics.tea)}, "
            f"tomorrow "
            f"{format_amount(summary.metrics.interest_tomorrow, summary.currency)}"
        )


def print_view(view: AssetRowsView) -> None:
    """Print asset rows, category totals and portfolio totals."""
    for row in view.rows:
        print(
            f"{row.category:<9} {row.symbol:<8} {row.account_id:<12} "
            f"qty {row.quantity:>14} | "
            f"{format_amount(row.val_ars, 'ARS'):>20} | "
            f"{format_amount(row.val_usd, 'USD'):>16} | "
            f"PnL {format_amount(row.pnl_ars, 'ARS')} / "
            f"{format_amount(row.pnl_usd, 'USD')} "
            f"({format_percent(row.pnl_pct)})"
        )
    for category in view.categories:
        print(
            f"{category.category}: {format_amount(category.total_ars, 'ARS')}"
            f" / {format_amount(category.total_usd, 'USD')}"
        )
    totals = view.totals
    print(
        f"Total: {format_amount(totals.total_ars, 'ARS')} / "
        f"{format_amount(totals.total_usd, 'USD')} | PnL "
        f"{format_amount(totals.pnl_ars, 'ARS')} "
        f"({format_percent(totals.pnl_pct)})"
    )
    for warning in view.warnings:
        print(
            f"Warning: movement {warning.movement_id} sells "
            f"{warning.requested} with only {warning.available} available"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
