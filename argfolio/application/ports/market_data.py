"""Ports for live FX and price feeds."""

from collections.abc import Sequence
from typing import Protocol

from argfolio.domain.models import FxRates, PriceQuote


class FxFeedPort(Protocol):
    """Port exposing the current Argentine dollar markets."""

    def fetch_fx_rates(self) -> FxRates:
        """Return the latest FX snapshot.

        Raises:
            MarketDataError: If the provider fails.
        """


class PriceFeedPort(Protocol):
    """Port exposing live instrument prices."""

    def fetch_prices(self, symbols: Sequence[str]) -> dict[str, PriceQuote]:
        """Return price quotes keyed by symbol.

        Symbols the provider does not know are omitted.

        Raises:
            MarketDataError: If the provider fails.
        """


__all__ = ["FxFeedPort", "PriceFeedPort"]
