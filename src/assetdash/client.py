"""High-level async client for the asset dashboard API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp

from assetdash._api import assets as _assets_api
from assetdash._api import configuration as _configuration_api
from assetdash._api import power as _power_api
from assetdash._api import telemetry as _telemetry_api
from assetdash._transport import HttpTransport, Transport
from assetdash.cache import CacheKey, QueryCache, get_query_cache
from assetdash.config import DashboardConfig
from assetdash.exceptions import AssetDashError, AssetNotFoundError
from assetdash.live.reconciler import ChannelReconciler, LiveHandle, OverlayCallback
from assetdash.models.asset import AssetRecord
from assetdash.models.configuration import AssetConfiguration, ConfigurationList
from assetdash.models.power import PowerHistory
from assetdash.models.telemetry import TelemetryRecord

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class AssetDashClient:
    """Async client for the asset dashboard API.

    Usage::

        async with AssetDashClient(DashboardConfig.from_env()) as client:
            assets = await client.get_assets()
            async with client.open_live(assets[0].id) as handle:
                ...

    Reads go through the process-wide :class:`QueryCache` unless
    ``refresh=True`` is passed or caching is disabled in the config.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        cache: QueryCache | None = None,
    ) -> None:
        self._config = config or DashboardConfig()
        self._external_session = session is not None
        self._http_session = session
        self._cache = cache if cache is not None else get_query_cache()
        self._transport: Transport | None = None
        self._live: ChannelReconciler | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> AssetDashClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        self._live = ChannelReconciler(
            url=self._config.telemetry_ws_url,
            http_session=self._http_session,
            heartbeat=self._config.ws_heartbeat,
            enabled=self._config.live_enabled,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._live is not None:
            await self._live.aclose()
            self._live = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def cache(self) -> QueryCache:
        return self._cache

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise AssetDashError("Client not initialized. Use 'async with AssetDashClient(...) as client:'")
        return self._transport

    def _require_live(self) -> ChannelReconciler:
        if self._live is None:
            raise AssetDashError("Client not initialized. Use 'async with AssetDashClient(...) as client:'")
        return self._live

    async def _read(self, key: CacheKey, fetch: Callable[[], Awaitable[T]], *, refresh: bool) -> T:
        if not self._config.cache_enabled:
            return await fetch()
        if refresh:
            self._cache.invalidate(*key)
        return await self._cache.get_or_fetch(key, fetch)

    # ------------------------------------------------------------------
    # Pull reads
    # ------------------------------------------------------------------

    async def get_assets(self, *, refresh: bool = False) -> list[AssetRecord]:
        transport = self._require_transport()
        return await self._read(("assets", None), lambda: _assets_api.fetch_assets(transport), refresh=refresh)

    async def get_asset(self, asset_id: str, *, refresh: bool = False) -> AssetRecord:
        transport = self._require_transport()
        return await self._read(
            ("asset", asset_id),
            lambda: _assets_api.fetch_asset(transport, asset_id),
            refresh=refresh,
        )

    async def get_telemetry(self, asset_id: str, *, refresh: bool = False) -> TelemetryRecord:
        transport = self._require_transport()
        return await self._read(
            ("telemetry", asset_id),
            lambda: _telemetry_api.fetch_telemetry(transport, asset_id),
            refresh=refresh,
        )

    async def get_power(self, asset_id: str, *, refresh: bool = False) -> PowerHistory:
        transport = self._require_transport()
        return await self._read(
            ("power", asset_id),
            lambda: _power_api.fetch_power(transport, asset_id),
            refresh=refresh,
        )

    async def get_configuration(self, asset_id: str, *, refresh: bool = False) -> AssetConfiguration | None:
        """Stored configuration for *asset_id*, or ``None`` if the asset has none.

        A missing configuration is an expected state, so it is returned
        rather than raised and the read is never retried.
        """
        transport = self._require_transport()
        try:
            return await self._read(
                ("configuration", asset_id),
                lambda: _configuration_api.fetch_configuration(transport, asset_id),
                refresh=refresh,
            )
        except AssetNotFoundError:
            _logger.debug("No stored configuration for %s", asset_id)
            return None

    async def get_configurations(self, *, refresh: bool = False) -> ConfigurationList:
        transport = self._require_transport()
        return await self._read(
            ("configurations", None),
            lambda: _configuration_api.fetch_configurations(transport),
            refresh=refresh,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save_configuration(self, config: AssetConfiguration) -> AssetConfiguration:
        """Save *config*, then invalidate cached reads that include it.

        Raises :class:`ConfigurationValidationError` when the server
        rejects the body.
        """
        transport = self._require_transport()
        saved = await _configuration_api.save_configuration(transport, config)
        self._cache.invalidate("configuration", config.asset_id)
        self._cache.invalidate("configurations")
        _logger.debug("Saved configuration for %s", config.asset_id)
        return saved

    # ------------------------------------------------------------------
    # Live telemetry
    # ------------------------------------------------------------------

    @property
    def live(self) -> ChannelReconciler:
        return self._require_live()

    def open_live(self, asset_id: str, *, on_update: OverlayCallback | None = None) -> LiveHandle:
        """Open a push subscription for *asset_id* (see :class:`ChannelReconciler`)."""
        return self._require_live().open(asset_id, on_update=on_update)
