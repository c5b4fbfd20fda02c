"""Tests for infrastructure settings."""

from unittest.mock import MagicMock

import pytest

from argfolio.infrastructure import settings as settings_module
from argfolio.infrastructure.settings import ArgfolioSettings


ENV_VARS = (
    "ARGFOLIO_DB_URL",
    "ARGFOLIO_BASE_FX",
    "ARGFOLIO_STABLE_FX",
    "ARGFOLIO_COSTING_METHOD",
    "ARGFOLIO_HTTP_TIMEOUT",
)


@pytest.fixture
def fake_logger(monkeypatch, tmp_path):
    """Isolate settings from .env files and the real logger."""
    logger = MagicMock()
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: logger)
    monkeypatch.setattr(settings_module, "get_project_root", lambda: tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return logger


def test_from_env_defaults(fake_logger, tmp_path) -> None:
    """Without variables the defaults apply."""
    settings = ArgfolioSettings.from_env()

    assert settings.db_url == f"sqlite:///{tmp_path / 'data' / 'argfolio.db'}"
    assert settings.base_fx == "mep"
    assert settings.stable_fx == "cripto"
    assert settings.costing_method == "FIFO"
    assert settings.http_timeout == 10.0
    fake_logger.warning.assert_not_called()


def test_from_env_reads_values(fake_logger, monkeypatch) -> None:
    """Valid values are normalized."""
    monkeypatch.setenv("ARGFOLIO_DB_URL", "postgresql://argfolio")
    monkeypatch.setenv("ARGFOLIO_BASE_FX", " CCL ")
    monkeypatch.setenv("ARGFOLIO_STABLE_FX", "mep")
    monkeypatch.setenv("ARGFOLIO_COSTING_METHOD", "lifo")
    monkeypatch.setenv("ARGFOLIO_HTTP_TIMEOUT", "2.5")

    settings = ArgfolioSettings.from_env()

    assert settings == ArgfolioSettings(
        db_url="postgresql://argfolio",
        base_fx="ccl",
        stable_fx="mep",
        costing_method="LIFO",
        http_timeout=2.5,
    )


def test_from_env_falls_back_on_invalid_values(
    fake_logger,
    monkeypatch,
) -> None:
    """Invalid values log a warning and use the default."""
    monkeypatch.setenv("ARGFOLIO_BASE_FX", "blue")
    monkeypatch.setenv("ARGFOLIO_COSTING_METHOD", "HIFO")
    monkeypatch.setenv("ARGFOLIO_HTTP_TIMEOUT", "soon")

    settings = ArgfolioSettings.from_env()

    assert settings.base_fx == "mep"
    assert settings.costing_method == "FIFO"
    assert settings.http_timeout == 10.0
    assert fake_logger.warning.call_count == 3
