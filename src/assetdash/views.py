"""Consuming views: the dashboard table and the asset detail page.

Each view instance exclusively owns its baseline data, view state and
live handle. Failures are recorded on the instance as display messages
and never propagate out of the load/refresh calls.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from assetdash._api.configuration import validation_messages
from assetdash.client import AssetDashClient
from assetdash.exceptions import AssetDashError, AssetNotFoundError, ConfigurationValidationError
from assetdash.live.reconciler import LiveHandle, OverlayCallback
from assetdash.models.asset import AssetRecord
from assetdash.models.configuration import AssetConfiguration
from assetdash.models.telemetry import TelemetryRecord
from assetdash.selection import SelectionCoordinator
from assetdash.table.engine import DerivedView, TableView, ViewState

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverviewStats:
    """Asset counts for the dashboard overview charts."""

    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)


def overview_stats(records: Iterable[AssetRecord]) -> OverviewStats:
    """Count assets per status and per type, in first-seen order."""
    by_status: Counter[str] = Counter()
    by_type: Counter[str] = Counter()
    total = 0
    for record in records:
        total += 1
        by_status[record.status] += 1
        by_type[record.type] += 1
    return OverviewStats(total=total, by_status=dict(by_status), by_type=dict(by_type))


class DashboardView:
    """Asset table plus the chart selection that follows it."""

    LOAD_ERROR = "Failed to load assets."

    def __init__(self, client: AssetDashClient, *, page_size: int | None = None) -> None:
        self._client = client
        self._table = TableView(page_size=page_size or client.config.page_size)
        self._selection = SelectionCoordinator()
        self._records: tuple[AssetRecord, ...] = ()
        self._state = ViewState()
        self.error: str | None = None
        self.loaded = False

    @property
    def records(self) -> tuple[AssetRecord, ...]:
        return self._records

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def view(self) -> DerivedView:
        return self._table.derive(self._records, self._state)

    @property
    def selected_id(self) -> str | None:
        """Asset the trend chart should show."""
        return self._selection.resolve(self._records)

    @property
    def stats(self) -> OverviewStats:
        return overview_stats(self._records)

    @property
    def range_label(self) -> str:
        """Footer text such as ``"11–20 of 23 (filtered)"``; empty when nothing matches."""
        view = self.view
        total = view.total_after_filter
        if total == 0:
            return ""
        size = self._table.page_size
        start = (self._state.page - 1) * size + 1
        end = min(self._state.page * size, total)
        suffix = " (filtered)" if self._state.query.strip() else ""
        return f"{start}–{end} of {total}{suffix}"

    async def refresh(self, *, force: bool | None = None) -> bool:
        """Pull the asset collection. Returns whether the pull succeeded.

        The first load may reuse a cached collection another view pulled;
        every later refresh goes to the server unless *force* is ``False``.

        On failure the previous collection stays visible and :attr:`error`
        is set.
        """
        try:
            if force is None:
                force = self.loaded
            records = await self._client.get_assets(refresh=force)
        except AssetDashError:
            _logger.debug("Asset list pull failed", exc_info=True)
            self.error = self.LOAD_ERROR
            return False
        self._records = tuple(records)
        self.error = None
        self.loaded = True
        self._state = self._state.clamped(self.view.page_count)
        return True

    def search(self, query: str) -> DerivedView:
        self._state = self._state.with_query(query)
        return self.view

    def filter_status(self, status: str) -> DerivedView:
        self._state = self._state.with_status_filter(status)
        return self.view

    def sort_by(self, sort_key: str) -> DerivedView:
        self._state = self._state.toggle_sort(sort_key)
        return self.view

    def go_to_page(self, page: int) -> DerivedView:
        self._state = self._state.with_page(page, self.view.page_count)
        return self.view

    def select(self, asset_id: str | None) -> str | None:
        self._selection.select(asset_id)
        return self.selected_id


class AssetDetailView:
    """Detail page for one asset: live telemetry and its configuration.

    Use as an async context manager so the push subscription is closed on
    every exit path::

        async with AssetDetailView(client, "P-1") as detail:
            print(detail.telemetry)
    """

    NOT_FOUND_ERROR = "Asset not found."
    ASSET_ERROR = "Failed to load asset."
    TELEMETRY_ERROR = "Failed to load telemetry."
    CONFIGURATION_ERROR = "Failed to load configuration."

    def __init__(
        self,
        client: AssetDashClient,
        asset_id: str,
        *,
        on_live_update: OverlayCallback | None = None,
    ) -> None:
        self._client = client
        self._asset_id = asset_id
        self._on_live_update = on_live_update
        self._handle: LiveHandle | None = None
        self._reset()

    def _reset(self) -> None:
        self.asset: AssetRecord | None = None
        self.baseline: TelemetryRecord | None = None
        self.configuration: AssetConfiguration | None = None
        self.asset_error: str | None = None
        self.telemetry_error: str | None = None
        self.configuration_error: str | None = None
        self.save_errors: list[str] = []
        self.saved = False

    async def __aenter__(self) -> AssetDetailView:
        await self.load()
        self.open_live()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    @property
    def asset_id(self) -> str:
        return self._asset_id

    @property
    def telemetry(self) -> TelemetryRecord | None:
        """Effective telemetry: the pushed overlay if any, else the baseline."""
        if self._handle is None:
            return self.baseline
        return self._handle.effective_value(self.baseline)

    @property
    def is_live(self) -> bool:
        return self._handle is not None and self._handle.is_live

    def open_live(self) -> LiveHandle:
        if self._handle is None or self._handle.is_closed:
            self._handle = self._client.open_live(self._asset_id, on_update=self._on_live_update)
        return self._handle

    async def close(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            await handle.aclose()

    async def load(self) -> None:
        """Pull asset, telemetry baseline and configuration independently."""
        try:
            self.asset = await self._client.get_asset(self._asset_id)
            self.asset_error = None
        except AssetNotFoundError:
            self.asset_error = self.NOT_FOUND_ERROR
        except AssetDashError:
            _logger.debug("Asset pull failed for %s", self._asset_id, exc_info=True)
            self.asset_error = self.ASSET_ERROR

        await self.refresh_telemetry()

        try:
            self.configuration = await self._client.get_configuration(self._asset_id)
            self.configuration_error = None
        except AssetDashError:
            _logger.debug("Configuration pull failed for %s", self._asset_id, exc_info=True)
            self.configuration_error = self.CONFIGURATION_ERROR

    async def refresh_telemetry(self) -> bool:
        """Re-pull the telemetry baseline. A live overlay keeps priority."""
        try:
            self.baseline = await self._client.get_telemetry(self._asset_id, refresh=True)
        except AssetDashError:
            _logger.debug("Telemetry pull failed for %s", self._asset_id, exc_info=True)
            self.telemetry_error = self.TELEMETRY_ERROR
            return False
        self.telemetry_error = None
        return True

    async def switch_asset(self, asset_id: str) -> None:
        """Follow another asset: fresh subscription, fresh data."""
        if asset_id == self._asset_id:
            return
        self._asset_id = asset_id
        self._reset()
        if self._handle is not None:
            self._handle = self._client.live.reopen(self._handle, asset_id, on_update=self._on_live_update)
        await self.load()

    def form_defaults(self) -> AssetConfiguration:
        """Values to pre-fill the configuration form with."""
        if self.configuration is not None:
            return self.configuration
        return AssetConfiguration.defaults_for(self._asset_id, self.asset)

    async def save_configuration(self, config: AssetConfiguration) -> bool:
        """Submit *config* for this asset. Returns whether the save succeeded.

        Rejections are exposed as :attr:`save_errors`; the view stays
        usable and the caller may resubmit.
        """
        if config.asset_id != self._asset_id:
            config = config.model_copy(update={"asset_id": self._asset_id})
        self.save_errors = []
        self.saved = False
        try:
            saved = await self._client.save_configuration(config)
        except ConfigurationValidationError as exc:
            self.save_errors = exc.messages
            return False
        except AssetDashError as exc:
            _logger.debug("Configuration save failed for %s", self._asset_id, exc_info=True)
            self.save_errors = validation_messages(getattr(exc, "body", None))
            return False
        self.configuration = saved
        self.saved = True
        return True
