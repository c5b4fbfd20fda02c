"""Tests for cash balances derived from movements."""

from decimal import Decimal

from argfolio.domain.models import Movement
from argfolio.domain.services.cash_ledger import (
    cash_deltas,
    compute_cash_balances,
)


def _movement(movement_id: str, movement_type: str, day: int, **fields):
    fields.setdefault("trade_currency", "ARS")
    return Movement(
        id=movement_id,
        account_id=fields.pop("account_id", "broker"),
        type=movement_type,
        datetime_iso=f"2024-01-{day:02d}T10:00:00",
        **fields,
    )


def test_balances_net_trades_and_fees() -> None:
    """Buys pay price plus fee and sells receive price minus fee."""
    movements = [
        _movement("d1", "DEPOSIT", 1, total_amount=Decimal("1000")),
        _movement(
            "b1",
            "BUY",
            2,
            instrument_id="ggal",
            quantity=Decimal("2"),
            unit_price=Decimal("100"),
            fee_amount=Decimal("5"),
        ),
        _movement(
            "s1",
            "SELL",
            3,
            instrument_id="ggal",
            quantity=Decimal("1"),
            unit_price=Decimal("150"),
            fee_amount=Decimal("3"),
        ),
        _movement("w1", "WITHDRAW", 4, total_amount=Decimal("100")),
        _movement("i1", "INTEREST", 5, total_amount=Decimal("10")),
    ]

    balances = compute_cash_balances(movements)

    assert balances == {"broker": {"ARS": Decimal("852")}}


def test_fee_in_other_currency_is_its_own_delta() -> None:
    """A USD fee on an ARS trade is debited from the USD balance."""
    movement = _movement(
        "b1",
        "BUY",
        1,
        instrument_id="ggal",
        quantity=Decimal("1"),
        unit_price=Decimal("100"),
        fee_amount=Decimal("2"),
        fee_currency="USD",
    )

    assert cash_deltas(movement) == [
        ("ARS", Decimal("-100")),
        ("USD", Decimal("-2")),
    ]


def test_fee_movement_debits_fee_amount() -> None:
    """Standalone FEE movements reduce the fee currency balance."""
    movement = _movement(
        "f1",
        "FEE",
        1,
        trade_currency="USD",
        fee_amount=Decimal("7"),
    )

    assert cash_deltas(movement) == [("USD", Decimal("-7"))]


def test_balances_are_kept_per_account_and_currency() -> None:
    """Accounts and currencies never mix."""
    movements = [
        _movement("d1", "DEPOSIT", 1, total_amount=Decimal("500")),
        _movement(
            "d2",
            "DEPOSIT",
            1,
            account_id="wallet",
            trade_currency="USD",
            total_amount=Decimal("20"),
        ),
        _movement(
            "t1",
            "TRANSFER_OUT",
            2,
            account_id="wallet",
            trade_currency="USD",
            total_amount=Decimal("5"),
        ),
    ]

    balances = compute_cash_balances(movements)

    assert balances["broker"] == {"ARS": Decimal("500")}
    assert balances["wallet"] == {"USD": Decimal("15")}


def test_debt_movements_move_cash() -> None:
    """Taking debt adds cash and paying it back removes cash."""
    movements = [
        _movement("a1", "DEBT_ADD", 1, total_amount=Decimal("300")),
        _movement("p1", "DEBT_PAY", 2, total_amount=Decimal("100")),
    ]

    assert compute_cash_balances(movements) == {
        "broker": {"ARS": Decimal("200")}
    }
