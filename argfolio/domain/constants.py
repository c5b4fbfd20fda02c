"""Domain constants for portfolio accounting."""

from decimal import Decimal

MOVEMENT_TYPES = (
    "BUY",
    "SELL",
    "DEPOSIT",
    "WITHDRAW",
    "DIVIDEND",
    "INTEREST",
    "FEE",
    "TRANSFER_IN",
    "TRANSFER_OUT",
    "DEBT_ADD",
    "DEBT_PAY",
)

POSITION_INCREASING_TYPES = (
    "BUY",
    "DEPOSIT",
    "TRANSFER_IN",
    "DIVIDEND",
    "INTEREST",
)

POSITION_DECREASING_TYPES = (
    "SELL",
    "WITHDRAW",
    "TRANSFER_OUT",
)

# Income types that only move cash when they carry no quantity.
CASH_INCOME_TYPES = ("DIVIDEND", "INTEREST")

CURRENCIES = ("ARS", "USD", "USDT", "USDC", "BTC", "ETH")

# Trade currencies whose prices are quoted in dollars.
USD_LIKE_CURRENCIES = ("USD", "USDT", "USDC")

ASSET_CATEGORIES = (
    "CEDEAR",
    "FCI",
    "CASH_ARS",
    "CASH_USD",
    "CRYPTO",
    "STABLE",
)

FX_KEYS = ("oficial", "blue", "mep", "ccl", "cripto")

COSTING_METHODS = ("PPP", "FIFO", "LIFO", "CHEAPEST", "MANUAL")

DAYS_PER_YEAR = 365

# Residual quantities below this threshold are treated as zero.
QUANTITY_EPSILON = Decimal("0.00000001")


__all__ = [
    "MOVEMENT_TYPES",
    "POSITION_INCREASING_TYPES",
    "POSITION_DECREASING_TYPES",
    "CASH_INCOME_TYPES",
    "CURRENCIES",
    "USD_LIKE_CURRENCIES",
    "ASSET_CATEGORIES",
    "FX_KEYS",
    "COSTING_METHODS",
    "DAYS_PER_YEAR",
    "QUANTITY_EPSILON",
]
