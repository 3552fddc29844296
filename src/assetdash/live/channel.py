"""WebSocket runtime for the telemetry push channel."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

import aiohttp

_logger = logging.getLogger(__name__)


class TelemetryChannel:
    """One WebSocket subscription that hands text frames to a callback.

    The reader runs as a task on the current event loop. Connection
    failures and server closes end the task quietly; there is no
    reconnect. :meth:`stop` may be called at any time, any number of
    times, including before the socket finished connecting.
    """

    def __init__(
        self,
        *,
        url: str,
        http_session: aiohttp.ClientSession,
        on_text: Callable[[str], None],
        heartbeat: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = url
        self._http = http_session
        self._on_text = on_text
        self._heartbeat = heartbeat
        self._logger = logger or _logger
        self._task: asyncio.Task[None] | None = None
        self._connected = False

    @property
    def is_running(self) -> bool:
        """Whether the reader task is still alive."""
        return self._task is not None and not self._task.done()

    @property
    def is_connected(self) -> bool:
        return self._connected

    def start(self) -> None:
        """Start the reader task. Must be called from a running loop."""
        self.stop()
        self._logger.debug("Telemetry channel start url=%s", self._url)
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"telemetry-ws:{self._url}")

    def stop(self) -> None:
        """Cancel the reader without draining pending frames."""
        task = self._task
        self._task = None
        self._connected = False
        if task is None:
            return
        if not task.done():
            task.cancel()
            self._logger.debug("Telemetry channel stop requested")

    async def aclose(self) -> None:
        """Stop and wait until the socket is torn down."""
        task = self._task
        self.stop()
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        try:
            async with self._http.ws_connect(self._url, heartbeat=self._heartbeat) as ws:
                self._connected = True
                self._logger.debug("Telemetry channel connected url=%s", self._url)
                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        self._dispatch(msg.data)
                    elif msg.type == aiohttp.WSMsgType.BINARY:
                        self._dispatch_binary(msg.data)
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        self._logger.debug("Telemetry channel error: %s", ws.exception())
                        break
                self._logger.debug("Telemetry channel closed by server code=%s", ws.close_code)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError):
            self._logger.debug("Telemetry channel unavailable url=%s", self._url, exc_info=True)
        finally:
            self._connected = False

    def _dispatch_binary(self, data: bytes) -> None:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            self._logger.debug("Dropping non-UTF-8 binary frame (%d bytes)", len(data))
            return
        self._dispatch(text)

    def _dispatch(self, text: str) -> None:
        try:
            self._on_text(text)
        except Exception:
            self._logger.debug("Telemetry message handler failure", exc_info=True)
