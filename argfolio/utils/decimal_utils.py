"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, JSON or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def coerce_optional_decimal(value) -> Decimal | None:
    """Normalize numeric values to Decimal while preserving missing values.

    Args:
        value: Raw numeric value, empty string or None.

    Returns:
        Decimal | None: Normalized value, or None when missing or not finite.
    """
    if value is None or value == "":
        return None
    try:
        result = coerce_decimal(value)
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def safe_ratio(
    numerator: Decimal | None,
    denominator: Decimal | None,
) -> Decimal | None:
    """Return numerator / denominator, or None for a missing or zero base."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


__all__ = ["coerce_decimal", "coerce_optional_decimal", "safe_ratio"]
