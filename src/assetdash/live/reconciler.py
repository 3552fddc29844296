"""Reconcile pushed telemetry with the pulled baseline.

A :class:`LiveHandle` follows one subject (asset). Every inbound
``telemetry_update`` batch is scanned for that subject; a match replaces
the handle's overlay as a whole. Display code asks the handle for the
effective value: the overlay when one arrived, else the pulled baseline.

Once an overlay exists it keeps priority over newer pulls for the rest
of the handle's lifetime; reopening the handle clears it.
"""

from __future__ import annotations

import json
import logging
import weakref
from collections.abc import Callable
from typing import Any

import aiohttp
from pydantic import ValidationError

from assetdash.live.channel import TelemetryChannel
from assetdash.models.telemetry import TelemetryRecord, TelemetryUpdateMessage

_logger = logging.getLogger(__name__)

OverlayCallback = Callable[[TelemetryRecord], None]


def extract_subject_update(raw: str | bytes, subject_id: str) -> TelemetryRecord | None:
    """Return the record for *subject_id* from a raw push message, if any.

    Non-JSON text, envelopes without ``type``/``data``, other message
    types and invalid entries all yield ``None``.
    """
    try:
        payload: Any = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        _logger.debug("Dropping non-JSON push message")
        return None

    try:
        envelope = TelemetryUpdateMessage.model_validate(payload)
    except ValidationError:
        kind = payload.get("type") if isinstance(payload, dict) else None
        _logger.debug("Ignoring push message type=%r", kind)
        return None

    for entry in envelope.data:
        if not isinstance(entry, dict) or entry.get("asset_id") != subject_id:
            continue
        try:
            return TelemetryRecord.model_validate(entry)
        except ValidationError:
            _logger.debug("Dropping invalid telemetry entry for %s", subject_id, exc_info=True)
    return None


class LiveHandle:
    """Overlay state for one subject, scoped to one channel subscription.

    Usable as an async context manager so the channel is released on
    every exit path::

        async with reconciler.open(asset_id) as handle:
            shown = handle.effective_value(baseline)
    """

    def __init__(
        self,
        subject_id: str,
        *,
        on_update: OverlayCallback | None = None,
    ) -> None:
        self._subject_id = subject_id
        self._on_update = on_update
        self._overlay: TelemetryRecord | None = None
        self._channel: TelemetryChannel | None = None
        self._closed = False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<LiveHandle subject={self._subject_id!r} {state} live={self.is_live}>"

    async def __aenter__(self) -> LiveHandle:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    @property
    def subject_id(self) -> str:
        return self._subject_id

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_live(self) -> bool:
        """Whether a pushed value is currently overriding the baseline."""
        return self._overlay is not None

    @property
    def is_connected(self) -> bool:
        return self._channel is not None and self._channel.is_connected

    def current_overlay(self) -> TelemetryRecord | None:
        return self._overlay

    def effective_value(self, baseline: TelemetryRecord | None) -> TelemetryRecord | None:
        """Overlay if present, else *baseline* (which may be ``None``)."""
        if self._overlay is not None:
            return self._overlay
        return baseline

    def handle_message(self, raw: str | bytes) -> bool:
        """Process one inbound push message. Returns whether the overlay changed."""
        if self._closed:
            return False
        record = extract_subject_update(raw, self._subject_id)
        if record is None:
            return False
        self._overlay = record
        if self._on_update is not None:
            try:
                self._on_update(record)
            except Exception:
                _logger.warning("Live update callback failed for %s", self._subject_id, exc_info=True)
        return True

    def _attach(self, channel: TelemetryChannel) -> None:
        self._channel = channel
        channel.start()

    def close(self) -> None:
        """Terminate the subscription immediately. Safe to call repeatedly."""
        self._closed = True
        channel = self._channel
        self._channel = None
        if channel is not None:
            channel.stop()

    async def aclose(self) -> None:
        """Close and wait for the socket to be torn down."""
        self._closed = True
        channel = self._channel
        self._channel = None
        if channel is not None:
            await channel.aclose()


class ChannelReconciler:
    """Opens per-subject live handles over the telemetry push channel.

    With ``enabled=False`` (or no HTTP session) handles are still
    returned but never receive pushes, so callers always fall back to
    the pulled baseline.
    """

    def __init__(
        self,
        *,
        url: str,
        http_session: aiohttp.ClientSession | None,
        heartbeat: float | None = None,
        enabled: bool = True,
    ) -> None:
        self._url = url
        self._http = http_session
        self._heartbeat = heartbeat
        self._enabled = enabled and http_session is not None
        self._handles: weakref.WeakSet[LiveHandle] = weakref.WeakSet()

    @property
    def url(self) -> str:
        return self._url

    @property
    def enabled(self) -> bool:
        return self._enabled

    def open(self, subject_id: str, *, on_update: OverlayCallback | None = None) -> LiveHandle:
        """Open a fresh subscription for *subject_id*. Needs a running loop."""
        subject_id = subject_id.strip()
        if not subject_id:
            raise ValueError("subject_id must be non-empty")
        handle = LiveHandle(subject_id, on_update=on_update)
        if self._enabled and self._http is not None:
            channel = TelemetryChannel(
                url=self._url,
                http_session=self._http,
                on_text=handle.handle_message,
                heartbeat=self._heartbeat,
            )
            handle._attach(channel)
        self._handles.add(handle)
        _logger.debug("Opened live handle for %s", subject_id)
        return handle

    def close(self, handle: LiveHandle) -> None:
        handle.close()
        self._handles.discard(handle)

    def reopen(
        self,
        handle: LiveHandle,
        subject_id: str,
        *,
        on_update: OverlayCallback | None = None,
    ) -> LiveHandle:
        """Close *handle* and open a new one for *subject_id* with no overlay."""
        callback = on_update if on_update is not None else handle._on_update
        self.close(handle)
        return self.open(subject_id, on_update=callback)

    async def aclose(self) -> None:
        """Close every handle opened through this reconciler."""
        handles = list(self._handles)
        self._handles.clear()
        for handle in handles:
            await handle.aclose()
