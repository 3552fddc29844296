from __future__ import annotations

import pytest

from assetdash._constants import telemetry_ws_url
from assetdash.config import DashboardConfig
from assetdash.exceptions import AssetDashConfigError

_ENV_VARS = (
    "ASSETDASH_API_URL",
    "ASSETDASH_REQUEST_TIMEOUT",
    "ASSETDASH_WS_HEARTBEAT",
    "ASSETDASH_LIVE_ENABLED",
    "ASSETDASH_CACHE_ENABLED",
    "ASSETDASH_PAGE_SIZE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    ("base_url", "expected"),
    [
        ("http://localhost:8000", "ws://localhost:8000/ws/telemetry"),
        ("https://dash.example.com", "wss://dash.example.com/ws/telemetry"),
        ("https://dash.example.com/", "wss://dash.example.com/ws/telemetry"),
        ("HTTP://host:9000", "ws://host:9000/ws/telemetry"),
        ("https://example.com/proxy/api", "wss://example.com/proxy/api/ws/telemetry"),
    ],
)
def test_telemetry_ws_url(base_url: str, expected: str) -> None:
    assert telemetry_ws_url(base_url) == expected


@pytest.mark.parametrize("base_url", ["ftp://host", "localhost:8000", ""])
def test_telemetry_ws_url_rejects_non_http(base_url: str) -> None:
    with pytest.raises(ValueError):
        telemetry_ws_url(base_url)


def test_defaults() -> None:
    config = DashboardConfig()
    assert config.base_url == "http://localhost:8000"
    assert config.telemetry_ws_url == "ws://localhost:8000/ws/telemetry"
    assert config.page_size == 10
    assert config.live_enabled is True
    assert config.cache_enabled is True


def test_trailing_slash_stripped() -> None:
    assert DashboardConfig(base_url="https://dash.example.com/").base_url == "https://dash.example.com"


@pytest.mark.parametrize(
    "kwargs",
    [{"base_url": "dash.example.com"}, {"page_size": 0}, {"request_timeout": 0}],
)
def test_invalid_values(kwargs: dict) -> None:
    with pytest.raises(AssetDashConfigError):
        DashboardConfig(**kwargs)


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASSETDASH_API_URL", "https://dash.example.com")
    monkeypatch.setenv("ASSETDASH_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("ASSETDASH_WS_HEARTBEAT", "15")
    monkeypatch.setenv("ASSETDASH_LIVE_ENABLED", "off")
    monkeypatch.setenv("ASSETDASH_PAGE_SIZE", "25")

    config = DashboardConfig.from_env()
    assert config.base_url == "https://dash.example.com"
    assert config.request_timeout == 2.5
    assert config.ws_heartbeat == 15.0
    assert config.live_enabled is False
    assert config.cache_enabled is True
    assert config.page_size == 25


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASSETDASH_PAGE_SIZE", "25")
    assert DashboardConfig.from_env(page_size=5).page_size == 5


def test_from_env_unknown_bool_keeps_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASSETDASH_CACHE_ENABLED", "maybe")
    assert DashboardConfig.from_env().cache_enabled is True


def test_from_env_invalid_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASSETDASH_PAGE_SIZE", "ten")
    with pytest.raises(AssetDashConfigError, match="ASSETDASH"):
        DashboardConfig.from_env()
