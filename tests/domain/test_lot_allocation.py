"""Tests for sale allocation against open lots."""

from datetime import date
from decimal import Decimal

import pytest

from argfolio.domain.models import InventoryLot, ManualAllocation
from argfolio.domain.services.lot_allocation import allocate_sale


def _lot(lot_id: str, day: int, quantity: str, cost: str) -> InventoryLot:
    return InventoryLot(
        movement_id=lot_id,
        date=date(2024, 1, day),
        quantity=Decimal(quantity),
        original_quantity=Decimal(quantity),
        unit_cost_native=Decimal(cost),
        unit_cost_ars=Decimal(cost),
        unit_cost_usd=None,
    )


LOTS = [
    _lot("a", 1, "10", "100"),
    _lot("b", 2, "5", "80"),
    _lot("c", 3, "5", "120"),
]


def test_fifo_allocates_oldest_lots() -> None:
    """FIFO should take from the oldest lots first."""
    result = allocate_sale(LOTS, Decimal("12"), Decimal("150"), "FIFO")

    assert [(e.lot_id, e.quantity) for e in result.allocations] == [
        ("a", Decimal("10")),
        ("b", Decimal("2")),
    ]
    assert result.total_cost == Decimal("1160")
    assert result.proceeds == Decimal("1800")
    assert result.realized_pnl == Decimal("640")


def test_lifo_allocates_newest_lots() -> None:
    """LIFO should take from the newest lots first."""
    result = allocate_sale(LOTS, Decimal("6"), Decimal("150"), "lifo")

    assert result.method == "LIFO"
    assert [e.lot_id for e in result.allocations] == ["c", "b"]
    assert result.total_cost == Decimal("680")


def test_cheapest_allocates_lowest_cost_first() -> None:
    """CHEAPEST should take the lowest unit cost first."""
    result = allocate_sale(LOTS, Decimal("6"), Decimal("150"), "CHEAPEST")

    assert [e.lot_id for e in result.allocations] == ["b", "a"]
    assert result.total_cost == Decimal("500")


def test_ppp_uses_weighted_average_cost() -> None:
    """PPP should cost the sale at the weighted average."""
    result = allocate_sale(LOTS, Decimal("10"), Decimal("150"), "PPP")

    assert result.allocations == []
    assert result.total_cost == Decimal("1000")
    assert result.realized_pnl_pct == Decimal("0.5")


def test_manual_uses_requested_lots_only() -> None:
    """MANUAL should honor per-lot quantities and skip unknown lots."""
    result = allocate_sale(
        LOTS,
        Decimal("3"),
        Decimal("150"),
        "MANUAL",
        manual=[
            ManualAllocation("c", Decimal("2")),
            ManualAllocation("missing", Decimal("1")),
            ManualAllocation("b", Decimal("50")),
        ],
    )

    assert [(e.lot_id, e.quantity) for e in result.allocations] == [
        ("c", Decimal("2")),
        ("b", Decimal("5")),
    ]
    assert result.quantity_sold == Decimal("7")
    assert result.total_cost == Decimal("640")


def test_manual_without_allocations_falls_back_to_fifo() -> None:
    """MANUAL with no selections behaves like FIFO."""
    result = allocate_sale(LOTS, Decimal("1"), Decimal("150"), "MANUAL")

    assert result.method == "FIFO"
    assert [e.lot_id for e in result.allocations] == ["a"]


def test_quantity_is_capped_at_holding() -> None:
    """Selling more than held allocates the whole holding."""
    result = allocate_sale(LOTS, Decimal("100"), Decimal("150"), "FIFO")

    assert result.quantity_sold == Decimal("20")
    assert result.total_cost == Decimal("2000")


def test_empty_lots_return_empty_allocation() -> None:
    """No lots means nothing is sold."""
    result = allocate_sale([], Decimal("1"), Decimal("150"), "FIFO")

    assert result.quantity_sold == Decimal("0")
    assert result.realized_pnl_pct is None


def test_unknown_method_raises() -> None:
    """Unknown costing methods should raise ValueError."""
    with pytest.raises(ValueError):
        allocate_sale(LOTS, Decimal("1"), Decimal("150"), "HIFO")
