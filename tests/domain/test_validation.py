"""Tests for movement validation helpers."""

from dataclasses import replace
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from argfolio.domain.errors import MalformedMovementError
from argfolio.domain.models import Movement
from argfolio.domain.services.validation import (
    is_cash_only,
    validate_movement,
    validate_movement_batch,
)


def _trade(movement_id: str, movement_type: str, quantity, price="100"):
    return Movement(
        id=movement_id,
        account_id="broker",
        type=movement_type,
        datetime_iso="2024-01-01T10:00:00",
        trade_currency="ARS",
        instrument_id="ggal",
        quantity=Decimal(quantity) if quantity is not None else None,
        unit_price=Decimal(price) if price is not None else None,
    )


def test_validate_movement_accepts_complete_trade() -> None:
    """Complete trades pass validation silently."""
    validate_movement(_trade("b1", "BUY", "1"))


@pytest.mark.parametrize(
    ("movement", "reason"),
    [
        (_trade("x", "SWAP", "1"), "unknown type 'SWAP'"),
        (_trade("x", "BUY", "-1"), "negative quantity"),
        (_trade("x", "BUY", None), "missing quantity"),
        (_trade("x", "BUY", "1", price=None), "missing unit price"),
        (_trade("x", "SELL", None), "missing quantity"),
    ],
)
def test_validate_movement_rejects_malformed(movement, reason) -> None:
    """Malformed movements raise with a descriptive reason."""
    with pytest.raises(MalformedMovementError) as exc_info:
        validate_movement(movement)

    assert exc_info.value.reason == reason
    assert isinstance(exc_info.value, ValueError)


def test_cash_movement_requires_amount() -> None:
    """Deposits without an amount are malformed."""
    deposit = Movement(
        id="d1",
        account_id="broker",
        type="DEPOSIT",
        datetime_iso="2024-01-01T10:00:00",
        trade_currency="ARS",
    )

    with pytest.raises(MalformedMovementError):
        validate_movement(deposit)


def test_batch_flags_oversells_against_running_position() -> None:
    """Batch validation tracks holdings and clamps at zero."""
    logger = MagicMock()
    movements = [
        _trade("s1", "SELL", "3"),
        _trade("b1", "BUY", "2"),
        _trade("s2", "SELL", "5"),
        _trade("bad", "BUY", None),
    ]

    result = validate_movement_batch(
        movements,
        current_holdings={("ggal", "broker"): Decimal("4")},
        logger=logger,
    )

    assert [m.id for m in result.valid] == ["s1", "b1", "s2"]
    assert [r.movement.id for r in result.rejected] == ["bad"]
    assert len(result.oversell_warnings) == 1
    warning = result.oversell_warnings[0]
    assert warning.movement_id == "s2"
    assert warning.available == Decimal("3")
    assert logger.warning.call_count == 2


def test_cash_dividend_requires_only_an_amount() -> None:
    """Dividends tied to an instrument but without quantity are cash."""
    dividend = Movement(
        id="d1",
        account_id="broker",
        type="DIVIDEND",
        datetime_iso="2024-01-01T10:00:00Z",
        trade_currency="USD",
        instrument_id="ggal",
        total_amount=Decimal("50"),
    )

    assert is_cash_only(dividend)
    validate_movement(dividend)
    with pytest.raises(MalformedMovementError) as exc_info:
        validate_movement(replace(dividend, total_amount=None))
    assert exc_info.value.reason == "missing amount"


def test_batch_keeps_cash_dividends_out_of_positions() -> None:
    """Cash dividends are valid and do not change the running position."""
    dividend = Movement(
        id="d1",
        account_id="broker",
        type="DIVIDEND",
        datetime_iso="2024-01-01T10:00:00",
        trade_currency="ARS",
        instrument_id="ggal",
        total_amount=Decimal("50"),
    )

    result = validate_movement_batch(
        [_trade("b1", "BUY", "2"), dividend, _trade("s1", "SELL", "2")]
    )

    assert [m.id for m in result.valid] == ["b1", "d1", "s1"]
    assert result.rejected == []
    assert result.oversell_warnings == []


def test_validate_movement_rejects_invalid_timestamp() -> None:
    """Timestamps must be ISO-8601."""
    movement = replace(_trade("b1", "BUY", "1"), datetime_iso="yesterday")

    with pytest.raises(MalformedMovementError) as exc_info:
        validate_movement(movement)

    assert exc_info.value.reason == "invalid datetime 'yesterday'"
