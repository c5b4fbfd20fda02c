"""FX conversion between ARS and USD in liquidation mode.

Converting ARS to USD pays the ask (venta); converting USD to ARS receives
the bid (compra). A missing or zero rate yields None, never a rate of 1.
"""

from decimal import Decimal

from argfolio.domain.models import FxQuote, FxRates


def fx_mid(bid: Decimal | None, ask: Decimal | None) -> Decimal | None:
    """Return the midpoint of a quote, or the single side available."""
    return FxQuote(bid=bid, ask=ask).mid


def build_fx_quote(
    buy: Decimal | None,
    sell: Decimal | None,
) -> FxQuote | None:
    """Build a quote from provider buy/sell values.

    Args:
        buy: Provider "compra" value.
        sell: Provider "venta" value.

    Returns:
        FxQuote | None: Quote using one side for both when the other is
        missing, or None when neither side is usable.
    """
    bid = buy if buy else sell
    ask = sell if sell else buy
    if not bid and not ask:
        return None
    return FxQuote(bid=bid, ask=ask)


def to_usd_from_ars(
    amount_ars: Decimal | None,
    quote: FxQuote | None,
) -> Decimal | None:
    """Convert an ARS amount to USD paying the ask."""
    if amount_ars is None or quote is None or not quote.ask:
        return None
    return amount_ars / quote.ask


def to_ars_from_usd(
    amount_usd: Decimal | None,
    quote: FxQuote | None,
) -> Decimal | None:
    """Convert a USD amount to ARS receiving the bid."""
    if amount_usd is None or quote is None or not quote.bid:
        return None
    return amount_usd * quote.bid


def effective_rate(
    quote: FxQuote | None,
    primary_currency: str,
) -> Decimal | None:
    """Return the rate used to derive the non-primary currency."""
    if quote is None:
        return None
    if primary_currency == "ARS":
        return quote.ask or None
    return quote.bid or None


def reference_rates(
    fx_rates: FxRates,
    fx_key: str,
) -> dict[str, Decimal]:
    """Return mid rates keyed by trade currency for lot cost fallback.

    Args:
        fx_rates: Current FX snapshot.
        fx_key: Dollar market used as reference.

    Returns:
        dict[str, Decimal]: Rate per currency, empty when unavailable.
    """
    quote = fx_rates.get(fx_key)
    rate = quote.mid if quote is not None else None
    if not rate:
        return {}
    return {currency: rate for currency in ("ARS", "USD", "USDT", "USDC")}


__all__ = [
    "fx_mid",
    "build_fx_quote",
    "to_usd_from_ars",
    "to_ars_from_usd",
    "effective_rate",
    "reference_rates",
]
