"""Domain models for FX and price snapshots."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FxQuote:
    """ARS per USD quote for one dollar market.

    Attributes:
        bid: Rate received when selling USD (compra).
        ask: Rate paid when buying USD (venta).
    """

    bid: Decimal | None
    ask: Decimal | None

    @property
    def mid(self) -> Decimal | None:
        """Return the midpoint, or the single available side."""
        if not self.bid and not self.ask:
            return None
        if not self.bid:
            return self.ask
        if not self.ask:
            return self.bid
        return (self.bid + self.ask) / 2


@dataclass(frozen=True)
class FxRates:
    """Snapshot of Argentine dollar markets."""

    oficial: FxQuote | None = None
    blue: FxQuote | None = None
    mep: FxQuote | None = None
    ccl: FxQuote | None = None
    cripto: FxQuote | None = None
    updated_at: str | None = None
    source: str = "unknown"

    def get(self, key: str) -> FxQuote | None:
        """Return the quote for an FX key such as ``mep`` or ``cripto``."""
        return getattr(self, key.lower(), None)


@dataclass(frozen=True)
class PriceQuote:
    """Live price for an instrument in its native currency.

    Attributes:
        ticker: Instrument symbol or provider id.
        price_native: Last price in the instrument's native currency.
        price_usd: Optional USD price when the provider reports one.
        change_pct_1d: One-day change as a ratio (0.01 is 1 %).
    """

    ticker: str
    price_native: Decimal | None
    price_usd: Decimal | None = None
    change_pct_1d: Decimal | None = None


__all__ = ["FxQuote", "FxRates", "PriceQuote"]
