"""Domain models for accounts and instruments."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class CashYieldConfig:
    """Interest configuration for a remunerated cash account.

    Attributes:
        enabled: Whether daily interest accrual is active.
        tna: Nominal annual rate as a percentage (e.g. 34 for 34 %).
        currency: Currency of the balance that earns interest.
        compounding: Compounding policy; only DAILY is supported.
        last_accrued_date: Last date interest was credited through.
    """

    enabled: bool
    tna: Decimal
    currency: str = "ARS"
    compounding: str = "DAILY"
    last_accrued_date: date | None = None


@dataclass(frozen=True)
class Account:
    """Broker, exchange, bank or wallet holding movements."""

    id: str
    name: str
    kind: str
    default_currency: str
    cash_yield: CashYieldConfig | None = None


@dataclass(frozen=True)
class Instrument:
    """Tradable instrument tracked by the portfolio."""

    id: str
    symbol: str
    name: str
    category: str
    native_currency: str


__all__ = ["CashYieldConfig", "Account", "Instrument"]
