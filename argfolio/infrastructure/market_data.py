"""HTTP providers for FX quotes and crypto prices."""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal

import httpx

from argfolio.application.ports.market_data import FxFeedPort, PriceFeedPort
from argfolio.domain.errors import MarketDataError
from argfolio.domain.models import FxRates, PriceQuote
from argfolio.domain.services.fx import build_fx_quote
from argfolio.infrastructure.logging.logger import get_app_logger
from argfolio.utils.decimal_utils import coerce_optional_decimal


DOLAR_API_URL = "https://dolarapi.com/v1/dolares"
COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"

# DolarApi "casa" for each FX key.
DOLAR_API_CASAS = {
    "oficial": "oficial",
    "blue": "blue",
    "mep": "bolsa",
    "ccl": "contadoconliqui",
    "cripto": "cripto",
}

COINGECKO_IDS = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "ADA": "cardano",
    "DOT": "polkadot",
    "MATIC": "matic-network",
    "LINK": "chainlink",
    "UNI": "uniswap",
    "AAVE": "aave",
    "USDT": "tether",
    "USDC": "usd-coin",
    "DAI": "dai",
}


class DolarApiFxProvider(FxFeedPort):
    """FX feed backed by dolarapi.com."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
        logger=None,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Optional HTTP client, injected by tests.
            timeout: Request timeout in seconds for the default client.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logger or get_app_logger()

    def fetch_fx_rates(self) -> FxRates:
        """Return the current dollar markets.

        A missing cripto quote falls back to MEP.

        Returns:
            FxRates: Snapshot with oficial, blue, MEP, CCL and cripto quotes.

        Raises:
            MarketDataError: If the request fails or the payload is invalid.
        """
        payload = _get_json(self._client, DOLAR_API_URL, None, "DolarApi")
        if not isinstance(payload, list):
            raise MarketDataError("DolarApi returned an unexpected payload")

        by_casa = {
            item.get("casa"): item for item in payload if isinstance(item, dict)
        }
        quotes = {}
        for fx_key, casa in DOLAR_API_CASAS.items():
            item = by_casa.get(casa)
            if item is None:
                quotes[fx_key] = None
                continue
            quotes[fx_key] = build_fx_quote(
                coerce_optional_decimal(item.get("compra")),
                coerce_optional_decimal(item.get("venta")),
            )
        if quotes["cripto"] is None:
            self._logger.warning("DolarApi has no cripto quote; using MEP")
            quotes["cripto"] = quotes["mep"]

        self._logger.info(
            f"Fetched FX rates: "
            f"{sorted(key for key, quote in quotes.items() if quote)}"
        )
        return FxRates(
            **quotes,
            updated_at=datetime.now(timezone.utc).isoformat(),
            source="dolarapi.com",
        )


class CoinGeckoPriceProvider(PriceFeedPort):
    """Crypto price feed backed by the CoinGecko simple price endpoint."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
        base_url: str = COINGECKO_BASE_URL,
        coin_ids: dict[str, str] | None = None,
        logger=None,
    ) -> None:
        self._client = client or httpx.Client(timeout=timeout)
        self._base_url = base_url.rstrip("/")
        self._coin_ids = coin_ids or COINGECKO_IDS
        self._logger = logger or get_app_logger()

    def fetch_prices(self, symbols: Sequence[str]) -> dict[str, PriceQuote]:
        """Return USD prices keyed by symbol.

        Args:
            symbols: Crypto symbols such as BTC or USDT.

        Returns:
            dict[str, PriceQuote]: Quotes for symbols with a known CoinGecko
            id and a price in the response.

        Raises:
            MarketDataError: If the request fails.
        """
        wanted: dict[str, str] = {}
        for symbol in symbols:
            normalized = symbol.strip().upper()
            coin_id = self._coin_ids.get(normalized)
            if coin_id is None:
                self._logger.warning(f"No CoinGecko id for {normalized}")
                continue
            wanted[normalized] = coin_id
        if not wanted:
            return {}

        payload = _get_json(
            self._client,
            f"{self._base_url}/simple/price",
            {
                "ids": ",".join(sorted(set(wanted.values()))),
                "vs_currencies": "usd",
                "include_24hr_change": "true",
            },
            "CoinGecko",
        )
        if not isinstance(payload, dict):
            raise MarketDataError("CoinGecko returned an unexpected payload")

        prices: dict[str, PriceQuote] = {}
        for symbol, coin_id in wanted.items():
            entry = payload.get(coin_id)
            if not isinstance(entry, dict):
                continue
            price = coerce_optional_decimal(entry.get("usd"))
            if price is None:
                continue
            change = coerce_optional_decimal(entry.get("usd_24h_change"))
            prices[symbol] = PriceQuote(
                ticker=symbol,
                price_native=price,
                price_usd=price,
                change_pct_1d=(
                    change / Decimal("100") if change is not None else None
                ),
            )
        self._logger.info(f"Fetched {len(prices)} crypto prices")
        return prices


def _get_json(
    client: httpx.Client,
    url: str,
    params: dict[str, str] | None,
    provider: str,
):
    try:
        response = client.get(url, params=params)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        raise MarketDataError(
            f"{provider} error: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise MarketDataError(f"{provider} request failed: {exc}") from exc
    except ValueError as exc:
        raise MarketDataError(f"{provider} returned invalid JSON") from exc


__all__ = [
    "DOLAR_API_URL",
    "COINGECKO_BASE_URL",
    "COINGECKO_IDS",
    "DolarApiFxProvider",
    "CoinGeckoPriceProvider",
]
