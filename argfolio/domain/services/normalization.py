"""Domain normalization helpers."""


def normalize_currency(currency: str | None) -> str | None:
    """Normalize currency codes.

    Args:
        currency: Raw currency value from a repository or payload.

    Returns:
        str | None: Upper-cased currency code.
    """
    if not currency:
        return None
    cleaned = currency.strip()
    return cleaned.upper() if cleaned else None


def normalize_symbol(symbol: str | None) -> str | None:
    """Normalize instrument symbols.

    Args:
        symbol: Raw ticker or symbol.

    Returns:
        str | None: Upper-cased symbol.
    """
    if not symbol:
        return None
    cleaned = symbol.strip()
    return cleaned.upper() if cleaned else None


def normalize_fx_key(fx_key: str | None, default: str) -> str:
    """Normalize an FX market key such as MEP or ccl.

    Args:
        fx_key: Raw FX key.
        default: Key used when the raw value is empty.

    Returns:
        str: Lower-cased FX key.
    """
    if not fx_key or not fx_key.strip():
        return default
    return fx_key.strip().lower()


__all__ = ["normalize_currency", "normalize_symbol", "normalize_fx_key"]
