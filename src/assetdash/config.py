"""Client configuration for assetdash."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from assetdash._constants import BASE_URL, PAGE_SIZE, telemetry_ws_url
from assetdash.exceptions import AssetDashConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Base address of the dashboard HTTP API. The telemetry push
        channel is derived from it.
    request_timeout : float
        Total timeout in seconds for a single pull request.
    ws_heartbeat : float or None
        WebSocket ping interval in seconds, or ``None`` to disable pings.
    live_enabled : bool
        Open the telemetry push channel on detail views.
    cache_enabled : bool
        Read pull results through the process-wide query cache.
    page_size : int
        Rows per table page.
    """

    base_url: str = BASE_URL
    request_timeout: float = 10.0
    ws_heartbeat: float | None = None
    live_enabled: bool = True
    cache_enabled: bool = True
    page_size: int = PAGE_SIZE

    def __post_init__(self) -> None:
        if not self.base_url.lower().startswith(("http://", "https://")):
            raise AssetDashConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.page_size < 1:
            raise AssetDashConfigError(f"page_size must be positive, got {self.page_size}")
        if self.request_timeout <= 0:
            raise AssetDashConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def telemetry_ws_url(self) -> str:
        """WebSocket address of the telemetry push channel."""
        return telemetry_ws_url(self.base_url)

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from ``ASSETDASH_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("ASSETDASH_API_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        try:
            timeout_env = env.get("ASSETDASH_REQUEST_TIMEOUT")
            if timeout_env is not None:
                config_kwargs["request_timeout"] = float(timeout_env)

            heartbeat_env = env.get("ASSETDASH_WS_HEARTBEAT")
            if heartbeat_env is not None and heartbeat_env.strip():
                config_kwargs["ws_heartbeat"] = float(heartbeat_env)

            page_size_env = env.get("ASSETDASH_PAGE_SIZE")
            if page_size_env is not None:
                config_kwargs["page_size"] = int(page_size_env)
        except ValueError as exc:
            raise AssetDashConfigError(f"Invalid numeric ASSETDASH_* value: {exc}") from exc

        config_kwargs["live_enabled"] = _env_bool(env.get("ASSETDASH_LIVE_ENABLED"), True)
        config_kwargs["cache_enabled"] = _env_bool(env.get("ASSETDASH_CACHE_ENABLED"), True)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
