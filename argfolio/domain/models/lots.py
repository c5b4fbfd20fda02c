"""Domain models for FIFO inventory lots and sale allocations."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class InventoryLot:
    """Remaining tranche of a position tagged with its acquisition cost.

    Attributes:
        movement_id: Id of the movement that opened the lot.
        date: Acquisition date.
        quantity: Remaining quantity.
        original_quantity: Quantity at acquisition.
        unit_cost_native: Unit cost in the trade currency.
        unit_cost_ars: Unit cost in ARS, None when FX was unavailable.
        unit_cost_usd: Unit cost in USD, None when FX was unavailable.
        fx_at_trade: ARS per USD rate used to derive the other leg.
    """

    movement_id: str
    date: date
    quantity: Decimal
    original_quantity: Decimal
    unit_cost_native: Decimal
    unit_cost_ars: Decimal | None
    unit_cost_usd: Decimal | None
    fx_at_trade: Decimal | None = None

    @property
    def cost_native(self) -> Decimal:
        return self.quantity * self.unit_cost_native

    @property
    def cost_ars(self) -> Decimal | None:
        if self.unit_cost_ars is None:
            return None
        return self.quantity * self.unit_cost_ars

    @property
    def cost_usd(self) -> Decimal | None:
        if self.unit_cost_usd is None:
            return None
        return self.quantity * self.unit_cost_usd


@dataclass(frozen=True)
class OversellWarning:
    """Sale quantity exceeded the available FIFO inventory."""

    movement_id: str
    requested: Decimal
    available: Decimal

    @property
    def shortfall(self) -> Decimal:
        return self.requested - self.available


@dataclass(frozen=True)
class FifoResult:
    """Remaining lots for an (instrument, account) pair, oldest first."""

    lots: list[InventoryLot]
    warnings: list[OversellWarning] = field(default_factory=list)

    @property
    def total_quantity(self) -> Decimal:
        return sum((lot.quantity for lot in self.lots), Decimal("0"))

    @property
    def total_cost_native(self) -> Decimal:
        return sum((lot.cost_native for lot in self.lots), Decimal("0"))

    @property
    def total_cost_ars(self) -> Decimal | None:
        return _sum_optional(lot.cost_ars for lot in self.lots)

    @property
    def total_cost_usd(self) -> Decimal | None:
        return _sum_optional(lot.cost_usd for lot in self.lots)

    @property
    def avg_cost_ars(self) -> Decimal | None:
        return _average(self.total_cost_ars, self.total_quantity)

    @property
    def avg_cost_usd(self) -> Decimal | None:
        return _average(self.total_cost_usd, self.total_quantity)


@dataclass(frozen=True)
class AllocationEntry:
    """Quantity taken from a single lot by a simulated sale."""

    lot_id: str
    quantity: Decimal
    cost: Decimal


@dataclass(frozen=True)
class ManualAllocation:
    """User-selected quantity to sell from a lot."""

    lot_id: str
    quantity: Decimal


@dataclass(frozen=True)
class SaleAllocation:
    """Outcome of simulating a sale against open lots."""

    method: str
    allocations: list[AllocationEntry]
    quantity_sold: Decimal
    total_cost: Decimal
    proceeds: Decimal

    @property
    def realized_pnl(self) -> Decimal:
        return self.proceeds - self.total_cost

    @property
    def realized_pnl_pct(self) -> Decimal | None:
        if self.total_cost == 0:
            return None
        return self.realized_pnl / self.total_cost


def _sum_optional(values) -> Decimal | None:
    total = Decimal("0")
    for value in values:
        if value is None:
            return None
        total += value
    return total


def _average(total: Decimal | None, quantity: Decimal) -> Decimal | None:
    if total is None or quantity == 0:
        return None
    return total / quantity


__all__ = [
    "InventoryLot",
    "OversellWarning",
    "FifoResult",
    "AllocationEntry",
    "ManualAllocation",
    "SaleAllocation",
]
