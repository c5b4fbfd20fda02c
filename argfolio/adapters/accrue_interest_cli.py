"""CLI adapter to credit daily interest on remunerated cash accounts.

This module wires the AccrueInterestUseCase to the concrete repositories and
provides a command-line entry point meant to run once a day.
"""

import argparse
from datetime import date

from argfolio.application.use_cases.accrue_interest import (
    AccrueInterestUseCase,
)
from argfolio.infrastructure.container import (
    build_accounts_repository,
    build_database_adapter,
    build_movements_repository,
)
from argfolio.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the accrual command."""
    parser = argparse.ArgumentParser(
        description="Accrue daily interest on remunerated cash accounts"
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Run date as YYYY-MM-DD (defaults to today)",
    )
    parser.add_argument(
        "--account",
        default=None,
        help="Only accrue this account id",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the accrual use case and print one line per account."""
    args = build_parser().parse_args(argv)
    today = args.date or date.today()
    get_usage_logger().info(
        f"argfolio-accrue date={today} account={args.account or 'all'}"
    )

    logger = get_app_logger()
    db_adapter = build_database_adapter()
    use_case = AccrueInterestUseCase(
        accounts_repository=build_accounts_repository(db_adapter),
        movements_repository=build_movements_repository(db_adapter),
        logger=logger,
    )

    if args.account:
        results = {args.account: use_case.execute(args.account, today)}
    else:
        results = use_case.run_all(today)

    if not results:
        print("No accounts with active yield.")
        return
    for account_id, result in sorted(results.items()):
        print(
            f"{account_id}: {len(result.movements)} movements, "
            f"interest {result.total_interest:.2f}, "
            f"accrued through {result.new_last_accrued_date}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
