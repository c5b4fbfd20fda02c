"""Display formatting for dual-currency figures."""

from decimal import Decimal

MISSING_VALUE = "—"

CURRENCY_SYMBOLS = {
    "ARS": "$",
    "USD": "US$",
    "USDT": "USDT",
    "USDC": "USDC",
}

CURRENCY_DECIMALS = {
    "ARS": 2,
    "USD": 2,
    "USDT": 2,
    "USDC": 2,
    "BTC": 8,
    "ETH": 6,
}


def format_amount(value: Decimal | None, currency: str) -> str:
    """Format a money amount, rendering missing values as a dash."""
    if value is None or not value.is_finite():
        return MISSING_VALUE
    decimals = CURRENCY_DECIMALS.get(currency, 2)
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol} {value:,.{decimals}f}"


def format_percent(value: Decimal | None) -> str:
    """Format a ratio as a signed percentage."""
    if value is None or not value.is_finite():
        return MISSING_VALUE
    percent = value * Decimal("100")
    sign = "+" if percent >= 0 else ""
    return f"{sign}{percent:.2f}%"


__all__ = [
    "MISSING_VALUE",
    "CURRENCY_SYMBOLS",
    "CURRENCY_DECIMALS",
    "format_amount",
    "format_percent",
]
