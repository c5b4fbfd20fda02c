"""Use case to rebuild the open FIFO lots of a position."""

from collections.abc import Mapping
from decimal import Decimal

from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.models import FifoResult
from argfolio.domain.services.fifo import build_fifo_lots
from argfolio.infrastructure.logging.logger import get_app_logger


class GetInventoryLotsUseCase:
    """Build remaining lots for one (instrument, account) pair."""

    def __init__(
        self,
        movements_repository: MovementsRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            movements_repository: Port providing movement history.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._movements = movements_repository
        self._logger = logger or get_app_logger()

    def execute(
        self,
        instrument_id: str,
        account_id: str,
        reference_fx: Mapping[str, Decimal] | None = None,
    ) -> FifoResult:
        """Return the open lots of a position.

        Args:
            instrument_id: Instrument held.
            account_id: Account holding it.
            reference_fx: Optional rates for movements without fx_at_trade.

        Returns:
            FifoResult: Lots oldest first and any oversell warnings.
        """
        movements = self._movements.fetch_movements(instrument_id, account_id)
        result = build_fifo_lots(
            movements,
            reference_fx=reference_fx,
            logger=self._logger,
        )
        self._logger.info(
            f"Built {len(result.lots)} lots for {instrument_id} "
            f"in {account_id} from {len(movements)} movements"
        )
        return result


__all__ = ["GetInventoryLotsUseCase"]
