"""CLI adapter to preview the cost basis and PnL of a sale."""

import argparse
from decimal import Decimal, InvalidOperation

from argfolio.domain.constants import COSTING_METHODS
from argfolio.domain.models import ManualAllocation, SaleAllocation
from argfolio.domain.services.formatting import format_percent
from argfolio.infrastructure.container import (
    build_database_adapter,
    build_preview_sale_use_case,
)
from argfolio.infrastructure.logging.logger import get_usage_logger
from argfolio.infrastructure.settings import ArgfolioSettings


def parse_decimal(raw: str) -> Decimal:
    """Parse a non-negative Decimal argument."""
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Invalid number {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise argparse.ArgumentTypeError(f"Invalid number {raw!r}")
    return value


def parse_lot(raw: str) -> ManualAllocation:
    """Parse a ``LOT_ID=QUANTITY`` manual selection."""
    lot_id, sep, quantity = raw.partition("=")
    if not sep or not lot_id.strip():
        raise argparse.ArgumentTypeError(f"Expected LOT_ID=QTY, got {raw!r}")
    return ManualAllocation(
        lot_id=lot_id.strip(),
        quantity=parse_decimal(quantity),
    )


def build_parser(settings: ArgfolioSettings) -> argparse.ArgumentParser:
    """Return the argument parser of the sale preview command."""
    parser = argparse.ArgumentParser(
        description="Preview which lots a sale consumes and its realized PnL"
    )
    parser.add_argument("instrument_id", help="Instrument to sell")
    parser.add_argument("account_id", help="Account holding the instrument")
    parser.add_argument("--quantity", type=parse_decimal, required=True)
    parser.add_argument(
        "--price",
        type=parse_decimal,
        required=True,
        help="Sale price per unit in the native currency",
    )
    parser.add_argument(
        "--method",
        type=str.upper,
        choices=COSTING_METHODS,
        default=settings.costing_method,
        help="Costing method (defaults to ARGFOLIO_COSTING_METHOD)",
    )
    parser.add_argument(
        "--lot",
        action="append",
        type=parse_lot,
        default=[],
        metavar="LOT_ID=QTY",
        help="Lot selection for the MANUAL method",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the sale preview and print the allocation."""
    settings = ArgfolioSettings.from_env()
    args = build_parser(settings).parse_args(argv)
    get_usage_logger().info(
        f"argfolio-preview-sale {args.instrument_id} {args.account_id} "
        f"method={args.method}"
    )

    use_case = build_preview_sale_use_case(
        build_database_adapter(),
        settings=settings,
    )
    allocation = use_case.execute(
        args.instrument_id,
        args.account_id,
        args.quantity,
        args.price,
        method=args.method,
        manual=args.lot or None,
    )
    print_allocation(allocation)


def print_allocation(allocation: SaleAllocation) -> None:
    """Print per-lot consumption and the sale summary."""
    for entry in allocation.allocations:
        print(f"{entry.lot_id}: qty {entry.quantity} cost {entry.cost:.2f}")
    print(
        f"{allocation.method}: sold {allocation.quantity_sold}, "
        f"cost {allocation.total_cost:.2f}, "
        f"proceeds {allocation.proceeds:.2f}, "
        f"PnL {allocation.realized_pnl:.2f} "
        f"({format_percent(allocation.realized_pnl_pct)})"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
