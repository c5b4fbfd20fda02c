"""FIFO inventory engine for cost-basis lots.

Lots are rebuilt from the full movement history on every call; nothing is
persisted. Movements are processed in (instant, id) order, so any
permutation of the same input yields the same lots.
"""

from collections import deque
from collections.abc import Iterable, Mapping
from decimal import Decimal
from logging import Logger

from argfolio.domain.constants import (
    POSITION_DECREASING_TYPES,
    POSITION_INCREASING_TYPES,
    QUANTITY_EPSILON,
    USD_LIKE_CURRENCIES,
)
from argfolio.domain.errors import MalformedMovementError
from argfolio.domain.models import (
    FifoResult,
    InventoryLot,
    Movement,
    OversellWarning,
    movement_sort_key,
)
from argfolio.domain.services.validation import (
    is_cash_only,
    validate_movement,
    validate_timestamp,
)


def build_fifo_lots(
    movements: Iterable[Movement],
    *,
    reference_fx: Mapping[str, Decimal] | None = None,
    logger: Logger | None = None,
) -> FifoResult:
    """Build remaining inventory lots for one (instrument, account) pair.

    Args:
        movements: All movements of the pair, in any order.
        reference_fx: ARS per USD rate by trade currency, used only when a
            movement carries no ``fx_at_trade``.
        logger: Optional logger used for oversell warnings.

    Returns:
        FifoResult: Remaining lots oldest first, plus oversell warnings.

    Raises:
        MalformedMovementError: If a movement lacks quantity or price, or
            its timestamp is not ISO-8601.
    """
    pending = list(movements)
    for movement in pending:
        validate_timestamp(movement)
    ordered = sorted(pending, key=movement_sort_key)
    queue: deque[InventoryLot] = deque()
    warnings: list[OversellWarning] = []

    for movement in ordered:
        if is_cash_only(movement):
            continue
        if movement.type in POSITION_INCREASING_TYPES:
            validate_movement(movement)
            queue.append(_open_lot(movement, reference_fx))
        elif movement.type in POSITION_DECREASING_TYPES:
            validate_movement(movement)
            warning = _consume(queue, movement)
            if warning is not None:
                warnings.append(warning)
                if logger is not None:
                    logger.warning(
                        f"Oversell on movement {warning.movement_id}: "
                        f"requested={warning.requested}, "
                        f"available={warning.available}"
                    )

    return FifoResult(lots=list(queue), warnings=warnings)


def _open_lot(
    movement: Movement,
    reference_fx: Mapping[str, Decimal] | None,
) -> InventoryLot:
    quantity = movement.quantity
    price = movement.unit_price
    if quantity is None or price is None:
        raise MalformedMovementError(movement.id, "missing quantity or price")

    unit_cost = price
    fee = _capitalized_fee(movement)
    if fee and quantity > 0:
        unit_cost = price + fee / quantity

    fx = _resolve_fx(movement, reference_fx)
    currency = movement.trade_currency
    if currency == "ARS":
        unit_cost_ars = unit_cost
        unit_cost_usd = unit_cost / fx if fx else None
    elif currency in USD_LIKE_CURRENCIES:
        unit_cost_usd = unit_cost
        unit_cost_ars = unit_cost * fx if fx else None
    else:
        # Priced in another asset (e.g. BTC); neither leg is known.
        unit_cost_ars = None
        unit_cost_usd = None

    return InventoryLot(
        movement_id=movement.id,
        date=movement.trade_date,
        quantity=quantity,
        original_quantity=quantity,
        unit_cost_native=unit_cost,
        unit_cost_ars=unit_cost_ars,
        unit_cost_usd=unit_cost_usd,
        fx_at_trade=fx,
    )


def _consume(
    queue: deque[InventoryLot],
    movement: Movement,
) -> OversellWarning | None:
    requested = movement.quantity or Decimal("0")
    available = sum((lot.quantity for lot in queue), Decimal("0"))
    remaining = requested

    while remaining > 0 and queue:
        head = queue[0]
        if head.quantity - remaining > QUANTITY_EPSILON:
            queue[0] = _with_quantity(head, head.quantity - remaining)
            remaining = Decimal("0")
        else:
            remaining -= head.quantity
            queue.popleft()

    if remaining > QUANTITY_EPSILON:
        return OversellWarning(
            movement_id=movement.id,
            requested=requested,
            available=available,
        )
    return None


def _with_quantity(lot: InventoryLot, quantity: Decimal) -> InventoryLot:
    return InventoryLot(
        movement_id=lot.movement_id,
        date=lot.date,
        quantity=quantity,
        original_quantity=lot.original_quantity,
        unit_cost_native=lot.unit_cost_native,
        unit_cost_ars=lot.unit_cost_ars,
        unit_cost_usd=lot.unit_cost_usd,
        fx_at_trade=lot.fx_at_trade,
    )


def _resolve_fx(
    movement: Movement,
    reference_fx: Mapping[str, Decimal] | None,
) -> Decimal | None:
    if movement.fx_at_trade is not None and movement.fx_at_trade > 0:
        return movement.fx_at_trade
    if reference_fx:
        rate = reference_fx.get(movement.trade_currency)
        if rate is not None and rate > 0:
            return rate
    return None


def _capitalized_fee(movement: Movement) -> Decimal | None:
    if movement.type != "BUY" or not movement.fee_amount:
        return None
    fee_currency = movement.fee_currency or movement.trade_currency
    if fee_currency != movement.trade_currency:
        return None
    return movement.fee_amount


__all__ = ["build_fifo_lots"]
