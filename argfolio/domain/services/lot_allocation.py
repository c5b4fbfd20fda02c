"""Sale allocation against open lots.

Simulates how a sale would consume lots under a costing method without
touching the lots themselves:

* PPP: weighted average cost, no per-lot allocation.
* FIFO: oldest lots first.
* LIFO: newest lots first.
* CHEAPEST: lowest unit cost first, oldest first on ties.
* MANUAL: user-specified quantities per lot.
"""

from collections.abc import Sequence
from decimal import Decimal

from argfolio.domain.models import (
    AllocationEntry,
    InventoryLot,
    ManualAllocation,
    SaleAllocation,
)


def allocate_sale(
    lots: Sequence[InventoryLot],
    quantity: Decimal,
    price: Decimal,
    method: str,
    manual: Sequence[ManualAllocation] | None = None,
) -> SaleAllocation:
    """Simulate a sale allocation.

    Args:
        lots: Open lots from the FIFO engine.
        quantity: Quantity to sell; capped at the total holding.
        price: Sale price per unit in the lots' native currency.
        method: Costing method (PPP, FIFO, LIFO, CHEAPEST or MANUAL).
        manual: Per-lot quantities, used only by MANUAL.

    Returns:
        SaleAllocation: Allocated quantities, cost, proceeds and PnL.

    Raises:
        ValueError: If the costing method is unknown.
    """
    method = method.upper()
    if method not in ("PPP", "FIFO", "LIFO", "CHEAPEST", "MANUAL"):
        raise ValueError(f"Unknown costing method: {method}")
    if not lots:
        return _empty(method)

    if method == "MANUAL":
        if manual:
            return _allocate_manual(lots, manual, price)
        method = "FIFO"

    holding = sum((lot.quantity for lot in lots), Decimal("0"))
    sell_quantity = min(max(quantity, Decimal("0")), holding)
    if sell_quantity <= 0:
        return _empty(method)

    if method == "PPP":
        average = sum((lot.cost_native for lot in lots), Decimal("0")) / holding
        cost = sell_quantity * average
        return SaleAllocation(
            method=method,
            allocations=[],
            quantity_sold=sell_quantity,
            total_cost=cost,
            proceeds=sell_quantity * price,
        )

    ordered = _sort_lots(lots, method)
    entries: list[AllocationEntry] = []
    remaining = sell_quantity
    for lot in ordered:
        if remaining <= 0:
            break
        take = min(lot.quantity, remaining)
        entries.append(
            AllocationEntry(
                lot_id=lot.movement_id,
                quantity=take,
                cost=take * lot.unit_cost_native,
            )
        )
        remaining -= take
    return _summarize(method, entries, price)


def _sort_lots(
    lots: Sequence[InventoryLot],
    method: str,
) -> list[InventoryLot]:
    if method == "LIFO":
        return sorted(
            lots,
            key=lambda lot: (lot.date, lot.movement_id),
            reverse=True,
        )
    if method == "CHEAPEST":
        return sorted(
            lots,
            key=lambda lot: (lot.unit_cost_native, lot.date, lot.movement_id),
        )
    return sorted(lots, key=lambda lot: (lot.date, lot.movement_id))


def _allocate_manual(
    lots: Sequence[InventoryLot],
    manual: Sequence[ManualAllocation],
    price: Decimal,
) -> SaleAllocation:
    by_id = {lot.movement_id: lot for lot in lots}
    entries: list[AllocationEntry] = []
    for request in manual:
        lot = by_id.get(request.lot_id)
        if lot is None:
            continue
        take = min(max(request.quantity, Decimal("0")), lot.quantity)
        if take <= 0:
            continue
        entries.append(
            AllocationEntry(
                lot_id=lot.movement_id,
                quantity=take,
                cost=take * lot.unit_cost_native,
            )
        )
    return _summarize("MANUAL", entries, price)


def _summarize(
    method: str,
    entries: list[AllocationEntry],
    price: Decimal,
) -> SaleAllocation:
    quantity_sold = sum((entry.quantity for entry in entries), Decimal("0"))
    return SaleAllocation(
        method=method,
        allocations=entries,
        quantity_sold=quantity_sold,
        total_cost=sum((entry.cost for entry in entries), Decimal("0")),
        proceeds=quantity_sold * price,
    )


def _empty(method: str) -> SaleAllocation:
    return SaleAllocation(
        method=method,
        allocations=[],
        quantity_sold=Decimal("0"),
        total_cost=Decimal("0"),
        proceeds=Decimal("0"),
    )


__all__ = ["allocate_sale"]
