"""Cash balances per account and currency derived from movements."""

from collections.abc import Iterable
from decimal import Decimal

from argfolio.domain.constants import QUANTITY_EPSILON
from argfolio.domain.models import Movement, movement_sort_key

# Sign applied to the gross amount of each movement type.
CASH_SIGN: dict[str, int] = {
    "DEPOSIT": 1,
    "WITHDRAW": -1,
    "INTEREST": 1,
    "DIVIDEND": 1,
    "SELL": 1,
    "BUY": -1,
    "TRANSFER_IN": 1,
    "TRANSFER_OUT": -1,
    "DEBT_ADD": 1,
    "DEBT_PAY": -1,
}


def cash_deltas(movement: Movement) -> list[tuple[str, Decimal]]:
    """Return the signed cash deltas a movement produces.

    Buys pay the fee on top of the gross amount and sells receive the gross
    amount net of the fee when both share a currency. A fee in another
    currency becomes its own delta.

    Args:
        movement: Movement to translate.

    Returns:
        list[tuple[str, Decimal]]: (currency, amount) pairs.
    """
    currency = movement.trade_currency
    fee = movement.fee_amount or Decimal("0")
    fee_currency = movement.fee_currency or currency
    deltas: list[tuple[str, Decimal]] = []

    if movement.type == "FEE":
        amount = fee or movement.gross_amount or Decimal("0")
        deltas.append((fee_currency, -amount))
        return _non_zero(deltas)

    sign = CASH_SIGN.get(movement.type)
    if sign is None:
        return []
    gross = movement.gross_amount or Decimal("0")
    if fee and fee_currency == currency:
        gross = gross + fee if sign < 0 else gross - fee
    deltas.append((currency, sign * gross))
    if fee and fee_currency != currency:
        deltas.append((fee_currency, -fee))
    return _non_zero(deltas)


def compute_cash_balances(
    movements: Iterable[Movement],
) -> dict[str, dict[str, Decimal]]:
    """Compute cash balances by account and currency.

    Args:
        movements: Movements of any accounts, in any order.

    Returns:
        dict[str, dict[str, Decimal]]: Balance per account and currency.
    """
    balances: dict[str, dict[str, Decimal]] = {}
    for movement in sorted(movements, key=movement_sort_key):
        for currency, amount in cash_deltas(movement):
            account_balances = balances.setdefault(movement.account_id, {})
            account_balances[currency] = (
                account_balances.get(currency, Decimal("0")) + amount
            )
    return balances


def _non_zero(deltas: list[tuple[str, Decimal]]) -> list[tuple[str, Decimal]]:
    return [
        (currency, amount)
        for currency, amount in deltas
        if abs(amount) > QUANTITY_EPSILON
    ]


__all__ = ["CASH_SIGN", "cash_deltas", "compute_cash_balances"]
