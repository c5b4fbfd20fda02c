"""Domain validation helpers for movements."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from logging import Logger

from argfolio.domain.constants import (
    CASH_INCOME_TYPES,
    MOVEMENT_TYPES,
    POSITION_DECREASING_TYPES,
    POSITION_INCREASING_TYPES,
)
from argfolio.domain.errors import MalformedMovementError
from argfolio.domain.models import Movement, OversellWarning


@dataclass(frozen=True)
class RejectedMovement:
    """Movement excluded from a batch with the reason."""

    movement: Movement
    error: str


@dataclass(frozen=True)
class MovementBatchValidation:
    """Outcome of validating a batch of movements."""

    valid: list[Movement]
    rejected: list[RejectedMovement] = field(default_factory=list)
    oversell_warnings: list[OversellWarning] = field(default_factory=list)


def is_cash_only(movement: Movement) -> bool:
    """Return whether a movement only moves cash.

    Movements without an instrument are cash by definition. A dividend or
    interest payment tied to an instrument but carrying no quantity is a
    cash payout and leaves the position untouched.
    """
    if movement.instrument_id is None:
        return True
    return movement.type in CASH_INCOME_TYPES and movement.quantity is None


def validate_timestamp(movement: Movement) -> None:
    """Raise when a movement timestamp is not ISO-8601."""
    try:
        movement.occurred_at
    except ValueError as exc:
        raise MalformedMovementError(
            movement.id, f"invalid datetime {movement.datetime_iso!r}"
        ) from exc


def validate_movement(movement: Movement) -> None:
    """Raise when a movement lacks the numeric fields its type requires.

    Args:
        movement: Movement to check.

    Raises:
        MalformedMovementError: If required fields are missing or negative.
    """
    if movement.type not in MOVEMENT_TYPES:
        raise MalformedMovementError(
            movement.id, f"unknown type {movement.type!r}"
        )
    validate_timestamp(movement)
    for name in ("quantity", "unit_price", "total_amount", "fee_amount"):
        value = getattr(movement, name)
        if value is not None and value < 0:
            raise MalformedMovementError(movement.id, f"negative {name}")
    if is_cash_only(movement):
        if movement.type == "FEE":
            if movement.fee_amount is None and movement.gross_amount is None:
                raise MalformedMovementError(movement.id, "missing fee amount")
        elif movement.gross_amount is None:
            raise MalformedMovementError(movement.id, "missing amount")
        return
    if movement.type in POSITION_INCREASING_TYPES:
        if movement.quantity is None:
            raise MalformedMovementError(movement.id, "missing quantity")
        if movement.unit_price is None:
            raise MalformedMovementError(movement.id, "missing unit price")
    elif movement.type in POSITION_DECREASING_TYPES:
        if movement.quantity is None:
            raise MalformedMovementError(movement.id, "missing quantity")


def validate_movement_batch(
    movements: Iterable[Movement],
    current_holdings: Mapping[tuple[str, str], Decimal] | None = None,
    logger: Logger | None = None,
) -> MovementBatchValidation:
    """Split a batch into valid and rejected movements and flag oversells.

    Running positions are tracked per (instrument, account) in the order
    given and clamp at zero, matching the FIFO builder.

    Args:
        movements: Movements in import order.
        current_holdings: Positions already held before the batch.
        logger: Optional logger used for warnings.

    Returns:
        MovementBatchValidation: Valid rows, rejected rows and warnings.
    """
    running = dict(current_holdings or {})
    valid: list[Movement] = []
    rejected: list[RejectedMovement] = []
    warnings: list[OversellWarning] = []

    for movement in movements:
        try:
            validate_movement(movement)
        except MalformedMovementError as exc:
            rejected.append(RejectedMovement(movement, exc.reason))
            continue
        valid.append(movement)
        if is_cash_only(movement):
            continue
        key = (movement.instrument_id, movement.account_id)
        available = running.get(key, Decimal("0"))
        quantity = movement.quantity or Decimal("0")
        if movement.type in POSITION_INCREASING_TYPES:
            running[key] = available + quantity
        elif movement.type in POSITION_DECREASING_TYPES:
            if quantity > available:
                warnings.append(
                    OversellWarning(
                        movement_id=movement.id,
                        requested=quantity,
                        available=available,
                    )
                )
            running[key] = max(available - quantity, Decimal("0"))

    if logger is not None:
        if rejected:
            logger.warning(f"Rejected {len(rejected)} malformed movements")
        if warnings:
            logger.warning(f"Detected {len(warnings)} oversell movements")
    return MovementBatchValidation(
        valid=valid,
        rejected=rejected,
        oversell_warnings=warnings,
    )


__all__ = [
    "RejectedMovement",
    "MovementBatchValidation",
    "is_cash_only",
    "validate_timestamp",
    "validate_movement",
    "validate_movement_batch",
]
