"""Tests for yield projections and daily accrual."""

from datetime import date
from decimal import Decimal

from argfolio.domain.models import Account, CashYieldConfig
from argfolio.domain.services.yields import (
    accrual_movement_id,
    compute_tea,
    compute_yield_metrics,
    generate_accrual_movements,
)


def _account(
    last_accrued: date | None,
    enabled: bool = True,
    tna: str = "36.5",
) -> Account:
    return Account(
        id="wallet",
        name="Billetera",
        kind="WALLET",
        default_currency="ARS",
        cash_yield=CashYieldConfig(
            enabled=enabled,
            tna=Decimal(tna),
            last_accrued_date=last_accrued,
        ),
    )


def test_yield_metrics_compound_daily() -> None:
    """Projections compound the daily rate over 30 and 365 days."""
    metrics = compute_yield_metrics(Decimal("1000000"), Decimal("36.5"))

    assert metrics.daily_rate == Decimal("0.001")
    assert metrics.interest_tomorrow == Decimal("1000")
    assert metrics.proj_30d == Decimal("1000000") * (
        Decimal("1.001") ** 30 - 1
    )
    assert metrics.proj_30d > Decimal("30000")
    assert metrics.proj_1y == Decimal("1000000") * metrics.tea


def test_tea_exceeds_tna_for_positive_rates() -> None:
    """Daily compounding makes the effective rate exceed the nominal one."""
    tea = compute_tea(Decimal("36.5"))

    assert Decimal("0.440") < tea < Decimal("0.441")
    assert compute_tea(Decimal("0")) == Decimal("0")


def test_accrual_generates_one_movement_per_elapsed_day() -> None:
    """Interest is credited for each closed day and compounds."""
    result = generate_accrual_movements(
        _account(date(2024, 1, 1)),
        Decimal("1000000"),
        date(2024, 1, 4),
    )

    assert [m.id for m in result.movements] == [
        "yield-wallet-2024-01-02",
        "yield-wallet-2024-01-03",
    ]
    first, second = result.movements
    assert first.type == "INTEREST"
    assert first.trade_currency == "ARS"
    assert first.instrument_id is None
    assert first.datetime_iso == "2024-01-02T00:01:00"
    assert first.quantity == Decimal("1000")
    assert first.total_amount == Decimal("1000")
    assert first.unit_price == Decimal("1")
    assert second.quantity == Decimal("1001")
    assert result.total_interest == Decimal("2001")
    assert result.new_last_accrued_date == date(2024, 1, 3)


def test_accrual_is_idempotent_once_watermark_reaches_yesterday() -> None:
    """Running again on the same day generates nothing."""
    result = generate_accrual_movements(
        _account(date(2024, 1, 3)),
        Decimal("1000000"),
        date(2024, 1, 4),
    )

    assert result.movements == []
    assert result.new_last_accrued_date == date(2024, 1, 3)


def test_watermark_never_moves_backwards() -> None:
    """A watermark ahead of yesterday is kept."""
    result = generate_accrual_movements(
        _account(date(2024, 2, 1)),
        Decimal("1000"),
        date(2024, 1, 4),
    )

    assert result.movements == []
    assert result.new_last_accrued_date == date(2024, 2, 1)


def test_missing_watermark_initializes_to_yesterday() -> None:
    """The first run only sets the watermark."""
    result = generate_accrual_movements(
        _account(None),
        Decimal("1000000"),
        date(2024, 1, 4),
    )

    assert result.movements == []
    assert result.new_last_accrued_date == date(2024, 1, 3)


def test_zero_balance_advances_watermark_without_movements() -> None:
    """Days with no balance are skipped but still accrued through."""
    result = generate_accrual_movements(
        _account(date(2024, 1, 1)),
        Decimal("0"),
        date(2024, 1, 10),
    )

    assert result.movements == []
    assert result.new_last_accrued_date == date(2024, 1, 9)


def test_disabled_or_zero_rate_is_a_no_op() -> None:
    """Disabled configs and a zero TNA leave everything untouched."""
    disabled = generate_accrual_movements(
        _account(date(2024, 1, 1), enabled=False),
        Decimal("1000"),
        date(2024, 1, 10),
    )
    zero_rate = generate_accrual_movements(
        _account(date(2024, 1, 1), tna="0"),
        Decimal("1000"),
        date(2024, 1, 10),
    )

    assert disabled.movements == []
    assert disabled.new_last_accrued_date == date(2024, 1, 1)
    assert zero_rate.movements == []
    assert zero_rate.new_last_accrued_date == date(2024, 1, 1)


def test_accrual_movement_id_is_deterministic() -> None:
    """Ids derive from the account and date only."""
    assert accrual_movement_id("acc", date(2024, 3, 5)) == "yield-acc-2024-03-05"
