"""Domain model for immutable financial movements."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from argfolio.utils.datetime_utils import parse_datetime_iso


@dataclass(frozen=True)
class Movement:
    """Immutable financial event recorded for an account.

    Attributes:
        id: Unique identifier, also the upsert key.
        account_id: Account the movement belongs to.
        type: Movement type (BUY, SELL, DEPOSIT, ...).
        datetime_iso: ISO-8601 timestamp of the event.
        trade_currency: Currency of ``unit_price`` and ``total_amount``.
        instrument_id: Instrument traded, None for pure cash movements.
        quantity: Units moved; non-negative.
        unit_price: Price per unit in ``trade_currency``; non-negative.
        total_amount: Gross cash amount when it is not quantity * price.
        fx_at_trade: ARS per USD rate captured when the trade happened.
        fee_amount: Optional fee charged on the movement.
        fee_currency: Currency of the fee, defaults to the trade currency.
        notes: Free text.
    """

    id: str
    account_id: str
    type: str
    datetime_iso: str
    trade_currency: str
    instrument_id: str | None = None
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    total_amount: Decimal | None = None
    fx_at_trade: Decimal | None = None
    fee_amount: Decimal | None = None
    fee_currency: str | None = None
    notes: str | None = None

    @property
    def gross_amount(self) -> Decimal | None:
        """Return the explicit total, or quantity * unit price."""
        if self.total_amount is not None:
            return self.total_amount
        if self.quantity is None or self.unit_price is None:
            return None
        return self.quantity * self.unit_price

    @property
    def occurred_at(self) -> datetime:
        """Return the timezone-aware instant of the movement."""
        return parse_datetime_iso(self.datetime_iso)

    @property
    def trade_date(self) -> date:
        """Return the calendar date as written in the timestamp."""
        return self.occurred_at.date()


def movement_sort_key(movement: Movement) -> tuple[datetime, str]:
    """Return the (instant, id) key movements are processed in."""
    return movement.occurred_at, movement.id


__all__ = ["Movement", "movement_sort_key"]
