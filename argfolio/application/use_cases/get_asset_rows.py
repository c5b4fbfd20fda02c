"""Use case to value every open position of the portfolio."""

from collections.abc import Mapping

from argfolio.application.ports.instruments_repository import (
    InstrumentsRepositoryPort,
)
from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.constants import QUANTITY_EPSILON
from argfolio.domain.errors import MalformedMovementError
from argfolio.domain.models import (
    AssetRowMetrics,
    AssetRowsView,
    FxRates,
    Movement,
    OversellWarning,
    PriceQuote,
)
from argfolio.domain.services.fifo import build_fifo_lots
from argfolio.domain.services.fx import reference_rates
from argfolio.domain.services.valuation import (
    compute_asset_metrics,
    compute_category_breakdown,
    compute_portfolio_totals,
)
from argfolio.infrastructure.logging.logger import get_app_logger


class GetAssetRowsUseCase:
    """Group movements into positions and value them in ARS and USD."""

    def __init__(
        self,
        movements_repository: MovementsRepositoryPort,
        instruments_repository: InstrumentsRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            movements_repository: Port providing movement history.
            instruments_repository: Port providing instrument metadata.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._movements = movements_repository
        self._instruments = instruments_repository
        self._logger = logger or get_app_logger()

    def execute(
        self,
        fx_rates: FxRates,
        prices: Mapping[str, PriceQuote],
        base_fx: str = "mep",
        stable_fx: str = "cripto",
        reference_fx_key: str | None = None,
    ) -> AssetRowsView:
        """Return valued asset rows with totals.

        Args:
            fx_rates: Current FX snapshot.
            prices: Live prices keyed by instrument symbol.
            base_fx: FX key for CEDEARs, FCIs and cash (mep or ccl).
            stable_fx: FX key for crypto and stablecoins.
            reference_fx_key: FX market whose current mid is used for lots
                whose movements carry no fx_at_trade. None leaves those
                cost legs unknown.

        Returns:
            AssetRowsView: Rows sorted by category and symbol, totals,
            category breakdown and oversell warnings.
        """
        instruments = {
            instrument.id: instrument
            for instrument in self._instruments.fetch_instruments()
        }
        reference_fx = (
            reference_rates(fx_rates, reference_fx_key)
            if reference_fx_key
            else None
        )

        rows: list[AssetRowMetrics] = []
        warnings: list[OversellWarning] = []
        for (instrument_id, account_id), movements in self._group(
            self._movements.fetch_all_movements()
        ).items():
            instrument = instruments.get(instrument_id)
            if instrument is None:
                self._logger.warning(
                    f"Skipping {len(movements)} movements of unknown "
                    f"instrument {instrument_id}"
                )
                continue
            try:
                position = build_fifo_lots(
                    movements,
                    reference_fx=reference_fx,
                    logger=self._logger,
                )
            except MalformedMovementError as exc:
                self._logger.warning(
                    f"Skipping {instrument.symbol} in {account_id}: {exc}"
                )
                continue
            warnings.extend(position.warnings)
            if position.total_quantity <= QUANTITY_EPSILON:
                continue
            rows.append(
                compute_asset_metrics(
                    instrument,
                    account_id,
                    position,
                    prices.get(instrument.symbol),
                    fx_rates,
                    base_fx=base_fx,
                    stable_fx=stable_fx,
                )
            )

        rows.sort(key=lambda row: (row.category, row.symbol, row.account_id))
        self._logger.info(f"Valued {len(rows)} asset rows")
        return AssetRowsView(
            rows=rows,
            totals=compute_portfolio_totals(rows),
            categories=compute_category_breakdown(rows, logger=self._logger),
            warnings=warnings,
        )

    @staticmethod
    def _group(
        movements: list[Movement],
    ) -> dict[tuple[str, str], list[Movement]]:
        groups: dict[tuple[str, str], list[Movement]] = {}
        for movement in movements:
            if movement.instrument_id is None:
                continue
            key = (movement.instrument_id, movement.account_id)
            groups.setdefault(key, []).append(movement)
        return groups


__all__ = ["GetAssetRowsUseCase"]
