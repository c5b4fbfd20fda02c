"""Use case to project interest on a remunerated cash account."""

from dataclasses import dataclass
from decimal import Decimal

from argfolio.application.ports.accounts_repository import (
    AccountsRepositoryPort,
)
from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.models import YieldMetrics
from argfolio.domain.services.cash_ledger import compute_cash_balances
from argfolio.domain.services.yields import compute_yield_metrics
from argfolio.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class YieldSummary:
    """Interest projection for one account.

    Attributes:
        account_id: Account the projection belongs to.
        currency: Remunerated currency.
        balance: Current cash balance in that currency.
        tna: Nominal annual rate in percent.
        metrics: Daily rate, TEA and projections.
    """

    account_id: str
    currency: str
    balance: Decimal
    tna: Decimal
    metrics: YieldMetrics


class GetYieldSummaryUseCase:
    """Compute yield projections from the current cash balance."""

    def __init__(
        self,
        accounts_repository: AccountsRepositoryPort,
        movements_repository: MovementsRepositoryPort,
        logger=None,
    ) -> None:
        self._accounts = accounts_repository
        self._movements = movements_repository
        self._logger = logger or get_app_logger()

    def execute(self, account_id: str) -> YieldSummary | None:
        """Return the yield summary of an account.

        Args:
            account_id: Account to project.

        Returns:
            YieldSummary | None: Projection, or None when the account has no
            active yield configuration.

        Raises:
            RuntimeError: If the account does not exist.
        """
        account = self._accounts.fetch_account(account_id)
        if account is None:
            raise RuntimeError(f"Account not found: {account_id}")
        config = account.cash_yield
        if config is None or not config.enabled:
            self._logger.info(f"Account {account_id} has no active yield")
            return None

        balances = compute_cash_balances(
            self._movements.fetch_account_movements(account_id)
        )
        balance = balances.get(account_id, {}).get(
            config.currency, Decimal("0")
        )
        return YieldSummary(
            account_id=account_id,
            currency=config.currency,
            balance=balance,
            tna=config.tna,
            metrics=compute_yield_metrics(balance, config.tna),
        )


__all__ = ["GetYieldSummaryUseCase", "YieldSummary"]
