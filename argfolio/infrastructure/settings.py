"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from argfolio.domain.constants import COSTING_METHODS
from argfolio.infrastructure.logging.logger import get_app_logger
from argfolio.utils.utils import get_project_root


BASE_FX_CHOICES = ("mep", "ccl")
STABLE_FX_CHOICES = ("cripto", "mep", "ccl", "blue", "oficial")


def default_database_url() -> str:
    """Return the SQLite URL used when ARGFOLIO_DB_URL is not set."""
    db_path = get_project_root() / "data" / "argfolio.db"
    return f"sqlite:///{db_path}"


@dataclass(frozen=True)
class ArgfolioSettings:
    """Runtime settings for the portfolio engine.

    Attributes:
        db_url: SQLAlchemy URL of the movement store.
        base_fx: Dollar market for CEDEARs, FCIs and cash (mep or ccl).
        stable_fx: Dollar market for crypto and stablecoins.
        costing_method: Default method for sale previews.
        http_timeout: Timeout in seconds for market data requests.
    """

    db_url: str
    base_fx: str = "mep"
    stable_fx: str = "cripto"
    costing_method: str = "FIFO"
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ArgfolioSettings":
        """Build settings from environment variables and ``.env``.

        Invalid values are logged and replaced by their defaults.

        Returns:
            ArgfolioSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        return cls(
            db_url=os.getenv("ARGFOLIO_DB_URL") or default_database_url(),
            base_fx=cls._choice(
                "ARGFOLIO_BASE_FX", BASE_FX_CHOICES, "mep", logger
            ),
            stable_fx=cls._choice(
                "ARGFOLIO_STABLE_FX", STABLE_FX_CHOICES, "cripto", logger
            ),
            costing_method=cls._choice(
                "ARGFOLIO_COSTING_METHOD",
                COSTING_METHODS,
                "FIFO",
                logger,
                upper=True,
            ),
            http_timeout=cls._timeout(logger),
        )

    @staticmethod
    def _choice(
        name: str,
        choices: tuple[str, ...],
        default: str,
        logger,
        upper: bool = False,
    ) -> str:
        """Read an enumerated setting.

        Args:
            name: Environment variable name.
            choices: Accepted values.
            default: Value used when missing or invalid.
            logger: Logger used for warnings.
            upper: Whether values are upper-cased instead of lower-cased.

        Returns:
            str: Normalized value.
        """
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        value = raw.upper() if upper else raw.lower()
        if value not in choices:
            logger.warning(
                f"Invalid {name}={raw!r}; falling back to {default}"
            )
            return default
        return value

    @staticmethod
    def _timeout(logger) -> float:
        raw = os.getenv("ARGFOLIO_HTTP_TIMEOUT", "").strip()
        if not raw:
            return 10.0
        try:
            value = float(raw)
        except ValueError:
            value = 0.0
        if value <= 0:
            logger.warning(
                f"Invalid ARGFOLIO_HTTP_TIMEOUT={raw!r}; falling back to 10"
            )
            return 10.0
        return value


__all__ = ["ArgfolioSettings", "default_database_url"]
