"""Use case to simulate a sale under a costing method."""

from collections.abc import Sequence
from decimal import Decimal

from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.models import ManualAllocation, SaleAllocation
from argfolio.domain.services.fifo import build_fifo_lots
from argfolio.domain.services.lot_allocation import allocate_sale
from argfolio.infrastructure.logging.logger import get_app_logger


class PreviewSaleUseCase:
    """Preview cost basis and realized PnL of a prospective sale."""

    def __init__(
        self,
        movements_repository: MovementsRepositoryPort,
        logger=None,
        default_method: str = "FIFO",
    ) -> None:
        self._movements = movements_repository
        self._logger = logger or get_app_logger()
        self._default_method = default_method

    def execute(
        self,
        instrument_id: str,
        account_id: str,
        quantity: Decimal,
        price: Decimal,
        method: str | None = None,
        manual: Sequence[ManualAllocation] | None = None,
    ) -> SaleAllocation:
        """Return the simulated allocation of a sale.

        Args:
            instrument_id: Instrument to sell.
            account_id: Account holding it.
            quantity: Units to sell; capped at the holding.
            price: Sale price per unit in the native currency.
            method: Costing method; defaults to the configured one.
            manual: Per-lot quantities for MANUAL.

        Returns:
            SaleAllocation: Allocation, cost, proceeds and realized PnL.
        """
        lots = build_fifo_lots(
            self._movements.fetch_movements(instrument_id, account_id),
            logger=self._logger,
        ).lots
        allocation = allocate_sale(
            lots,
            quantity,
            price,
            method or self._default_method,
            manual=manual,
        )
        self._logger.info(
            f"Sale preview {allocation.method} for {instrument_id}: "
            f"sold={allocation.quantity_sold}, pnl={allocation.realized_pnl}"
        )
        return allocation


__all__ = ["PreviewSaleUseCase"]
