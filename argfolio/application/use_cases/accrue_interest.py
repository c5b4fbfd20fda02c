"""Use case to credit daily interest on remunerated cash accounts.

Each run generates the INTEREST movements elapsed since the account's
watermark and stores them together with the new watermark in a single
transaction. Movement ids derive from (account, date), so running twice
on the same day writes nothing new.
"""

from datetime import date
from decimal import Decimal

from argfolio.application.ports.accounts_repository import (
    AccountsRepositoryPort,
)
from argfolio.application.ports.movements_repository import (
    MovementsRepositoryPort,
)
from argfolio.domain.models import Account, AccrualResult
from argfolio.domain.services.cash_ledger import compute_cash_balances
from argfolio.domain.services.yields import generate_accrual_movements
from argfolio.infrastructure.logging.logger import get_app_logger


class AccrueInterestUseCase:
    """Generate and persist pending interest accruals."""

    def __init__(
        self,
        accounts_repository: AccountsRepositoryPort,
        movements_repository: MovementsRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            accounts_repository: Port providing accounts and yield settings.
            movements_repository: Port storing movements and watermarks.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._accounts = accounts_repository
        self._movements = movements_repository
        self._logger = logger or get_app_logger()

    def execute(self, account_id: str, today: date) -> AccrualResult:
        """Accrue interest for one account.

        Args:
            account_id: Account to accrue.
            today: Local date of the run.

        Returns:
            AccrualResult: Movements written and the resulting watermark.

        Raises:
            RuntimeError: If the account does not exist.
        """
        account = self._accounts.fetch_account(account_id)
        if account is None:
            raise RuntimeError(f"Account not found: {account_id}")
        return self._accrue(account, today)

    def run_all(self, today: date) -> dict[str, AccrualResult]:
        """Accrue interest for every account with an active yield.

        Args:
            today: Local date of the run.

        Returns:
            dict[str, AccrualResult]: Result per account id.
        """
        results: dict[str, AccrualResult] = {}
        for account in self._accounts.fetch_accounts():
            config = account.cash_yield
            if config is None or not config.enabled:
                continue
            results[account.id] = self._accrue(account, today)
        total = sum(len(result.movements) for result in results.values())
        self._logger.info(
            f"Accrual run for {today}: {len(results)} accounts, "
            f"{total} movements"
        )
        return results

    def _accrue(self, account: Account, today: date) -> AccrualResult:
        config = account.cash_yield
        currency = config.currency if config is not None else "ARS"
        balances = compute_cash_balances(
            self._movements.fetch_account_movements(account.id)
        )
        balance = balances.get(account.id, {}).get(currency, Decimal("0"))

        result = generate_accrual_movements(
            account,
            balance,
            today,
            logger=self._logger,
        )
        previous = config.last_accrued_date if config is not None else None
        if result.new_last_accrued_date is None:
            return result
        if result.movements or result.new_last_accrued_date != previous:
            self._movements.record_accrual(
                account.id,
                result.movements,
                result.new_last_accrued_date,
            )
        return result


__all__ = ["AccrueInterestUseCase"]
