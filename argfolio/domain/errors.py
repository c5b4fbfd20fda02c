"""Domain errors raised by the portfolio engine."""


class ArgfolioError(Exception):
    """Base class for engine errors."""


class MalformedMovementError(ArgfolioError, ValueError):
    """Raised when a movement lacks required numeric fields."""

    def __init__(self, movement_id: str, reason: str) -> None:
        super().__init__(f"Malformed movement {movement_id}: {reason}")
        self.movement_id = movement_id
        self.reason = reason


class BackupFormatError(ArgfolioError, ValueError):
    """Raised when a backup payload cannot be parsed."""


class MarketDataError(ArgfolioError, RuntimeError):
    """Raised when a market data provider fails or returns bad payloads."""


__all__ = [
    "ArgfolioError",
    "MalformedMovementError",
    "BackupFormatError",
    "MarketDataError",
]
