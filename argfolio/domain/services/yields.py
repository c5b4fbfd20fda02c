"""Interest projections and daily accrual for remunerated cash accounts.

Rates follow the Argentine convention: TNA is the nominal annual rate in
percent, compounded daily over a 365-day year.
"""

from datetime import date, timedelta
from decimal import Decimal
from logging import Logger

from argfolio.domain.constants import DAYS_PER_YEAR
from argfolio.domain.models import Account, AccrualResult, Movement, YieldMetrics


def daily_rate_from_tna(tna: Decimal) -> Decimal:
    """Return the daily rate for a nominal annual rate in percent."""
    return tna / Decimal("100") / DAYS_PER_YEAR


def compute_tea(tna: Decimal) -> Decimal:
    """Return the effective annual rate as a ratio.

    Args:
        tna: Nominal annual rate in percent.

    Returns:
        Decimal: ``(1 + tna/100/365) ** 365 - 1``.
    """
    return (1 + daily_rate_from_tna(tna)) ** DAYS_PER_YEAR - 1


def compute_yield_metrics(balance: Decimal, tna: Decimal) -> YieldMetrics:
    """Compute interest projections for a balance.

    Args:
        balance: Current principal.
        tna: Nominal annual rate in percent.

    Returns:
        YieldMetrics: Daily rate, TEA, tomorrow's interest and compounded
        30-day and one-year projections.
    """
    daily_rate = daily_rate_from_tna(tna)
    growth = 1 + daily_rate
    return YieldMetrics(
        daily_rate=daily_rate,
        tea=compute_tea(tna),
        interest_tomorrow=balance * daily_rate,
        proj_30d=balance * (growth**30 - 1),
        proj_1y=balance * (growth**DAYS_PER_YEAR - 1),
    )


def accrual_movement_id(account_id: str, accrual_date: date) -> str:
    """Return the idempotency key of an accrual movement."""
    return f"yield-{account_id}-{accrual_date.isoformat()}"


def generate_accrual_movements(
    account: Account,
    balance: Decimal,
    today: date,
    logger: Logger | None = None,
) -> AccrualResult:
    """Generate one INTEREST movement per elapsed day since the watermark.

    Interest for a day is credited once the day is over, so the walk runs
    from the day after ``last_accrued_date`` through yesterday, compounding
    on the running balance. Ids derive from (account, date), making
    re-runs idempotent under upsert.

    Args:
        account: Account with a cash yield configuration.
        balance: Current balance of the remunerated currency.
        today: Local date of the run.
        logger: Optional logger for accrual events.

    Returns:
        AccrualResult: New movements and the advanced watermark.
    """
    config = account.cash_yield
    if config is None or not config.enabled or not config.tna:
        watermark = config.last_accrued_date if config else None
        return AccrualResult(movements=[], new_last_accrued_date=watermark)

    yesterday = today - timedelta(days=1)
    if config.last_accrued_date is None:
        if logger is not None:
            logger.info(
                f"Initializing accrual watermark for {account.id} at {yesterday}"
            )
        return AccrualResult(movements=[], new_last_accrued_date=yesterday)
    if config.last_accrued_date >= yesterday:
        return AccrualResult(
            movements=[],
            new_last_accrued_date=config.last_accrued_date,
        )

    daily_rate = daily_rate_from_tna(config.tna)
    running_balance = balance
    movements: list[Movement] = []
    current = config.last_accrued_date + timedelta(days=1)
    while current <= yesterday:
        if running_balance > 0:
            interest = running_balance * daily_rate
            movements.append(
                Movement(
                    id=accrual_movement_id(account.id, current),
                    account_id=account.id,
                    type="INTEREST",
                    datetime_iso=f"{current.isoformat()}T00:01:00",
                    trade_currency=config.currency,
                    quantity=interest,
                    unit_price=Decimal("1"),
                    total_amount=interest,
                    notes=f"Rendimiento diario {config.tna}% TNA",
                )
            )
            running_balance += interest
        current += timedelta(days=1)

    if logger is not None:
        logger.info(
            f"Generated {len(movements)} accrual movements for {account.id} "
            f"through {yesterday}"
        )
    return AccrualResult(movements=movements, new_last_accrued_date=yesterday)


__all__ = [
    "daily_rate_from_tna",
    "compute_tea",
    "compute_yield_metrics",
    "accrual_movement_id",
    "generate_accrual_movements",
]
