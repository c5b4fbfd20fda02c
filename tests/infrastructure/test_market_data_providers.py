"""Tests for the DolarApi and CoinGecko providers."""

from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest

from argfolio.domain.errors import MarketDataError
from argfolio.domain.models import FxQuote
from argfolio.infrastructure.market_data import (
    CoinGeckoPriceProvider,
    DolarApiFxProvider,
)


DOLARES_PAYLOAD = [
    {"moneda": "USD", "casa": "oficial", "compra": 950, "venta": 990},
    {"moneda": "USD", "casa": "blue", "compra": 1180, "venta": 1200},
    {"moneda": "USD", "casa": "bolsa", "compra": 1150.5, "venta": 1160.5},
    {
        "moneda": "USD",
        "casa": "contadoconliqui",
        "compra": 1170,
        "venta": 1190,
    },
    {"moneda": "USD", "casa": "cripto", "compra": 1195, "venta": 1210},
    {"moneda": "USD", "casa": "tarjeta", "compra": 1500, "venta": 1600},
]


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_dolar_api_maps_casas_to_fx_keys() -> None:
    """Casas map to oficial, blue, MEP, CCL and cripto quotes."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        return httpx.Response(200, json=DOLARES_PAYLOAD)

    provider = DolarApiFxProvider(client=_client(handler), logger=MagicMock())

    rates = provider.fetch_fx_rates()

    assert requests == ["https://dolarapi.com/v1/dolares"]
    assert rates.mep == FxQuote(Decimal("1150.5"), Decimal("1160.5"))
    assert rates.ccl == FxQuote(Decimal("1170"), Decimal("1190"))
    assert rates.cripto == FxQuote(Decimal("1195"), Decimal("1210"))
    assert rates.oficial.ask == Decimal("990")
    assert rates.source == "dolarapi.com"
    assert rates.updated_at is not None


def test_dolar_api_falls_back_to_mep_for_cripto() -> None:
    """A missing cripto casa reuses the MEP quote."""
    payload = [item for item in DOLARES_PAYLOAD if item["casa"] != "cripto"]
    logger = MagicMock()
    provider = DolarApiFxProvider(
        client=_client(lambda request: httpx.Response(200, json=payload)),
        logger=logger,
    )

    rates = provider.fetch_fx_rates()

    assert rates.cripto == rates.mep
    logger.warning.assert_called_once()


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"casa": "oficial"}),
    ],
)
def test_dolar_api_errors_raise_market_data_error(response) -> None:
    """HTTP failures and unexpected payloads raise MarketDataError."""
    provider = DolarApiFxProvider(
        client=_client(lambda request: response),
        logger=MagicMock(),
    )

    with pytest.raises(MarketDataError):
        provider.fetch_fx_rates()


def test_dolar_api_transport_error_raises_market_data_error() -> None:
    """Network failures are wrapped in MarketDataError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    provider = DolarApiFxProvider(client=_client(handler), logger=MagicMock())

    with pytest.raises(MarketDataError):
        provider.fetch_fx_rates()


def test_coingecko_maps_symbols_and_daily_change() -> None:
    """Prices are keyed by symbol with the 24h change as a ratio."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(
            200,
            json={
                "bitcoin": {"usd": 65000.5, "usd_24h_change": -2.5},
                "tether": {"usd": 1.0},
            },
        )

    provider = CoinGeckoPriceProvider(
        client=_client(handler),
        logger=MagicMock(),
    )

    prices = provider.fetch_prices(["btc", "USDT", "DOGE"])

    assert seen["ids"] == "bitcoin,tether"
    assert seen["vs_currencies"] == "usd"
    assert seen["include_24hr_change"] == "true"
    assert set(prices) == {"BTC", "USDT"}
    assert prices["BTC"].price_native == Decimal("65000.5")
    assert prices["BTC"].change_pct_1d == Decimal("-0.025")
    assert prices["USDT"].change_pct_1d is None


def test_coingecko_skips_request_without_known_symbols() -> None:
    """Unknown symbols alone never hit the network."""
    handler = MagicMock()
    provider = CoinGeckoPriceProvider(
        client=_client(handler),
        logger=MagicMock(),
    )

    assert provider.fetch_prices(["DOGE"]) == {}
    handler.assert_not_called()


def test_coingecko_rate_limit_raises_market_data_error() -> None:
    """HTTP 429 surfaces as MarketDataError."""
    provider = CoinGeckoPriceProvider(
        client=_client(lambda request: httpx.Response(429)),
        logger=MagicMock(),
    )

    with pytest.raises(MarketDataError, match="429"):
        provider.fetch_prices(["BTC"])
