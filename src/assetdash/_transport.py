"""HTTP transport for the dashboard JSON API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from assetdash._constants import USER_AGENT
from assetdash._redact import redact_for_log
from assetdash.config import DashboardConfig
from assetdash.exceptions import AssetDashTransportError, AssetNotFoundError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        ...


def _decode_body(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


class HttpTransport:
    """Single-shot JSON request/response calls over an aiohttp session.

    No retries are attempted; every failure surfaces as an
    :class:`AssetDashTransportError` (or its 404 subclass).
    """

    def __init__(self, config: DashboardConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        return await self._request("POST", endpoint, payload)

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        url = f"{self._config.base_url}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        body: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json"
            body = json.dumps(payload)
            _logger.debug("%s %s body=%s", method, url, redact_for_log(payload))
        else:
            _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise AssetDashTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        if status == 404:
            raise AssetNotFoundError(
                f"HTTP 404 from {endpoint}",
                status_code=status,
                endpoint=endpoint,
                body=_decode_body(text),
            )
        if not 200 <= status < 300:
            raise AssetDashTransportError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
                body=_decode_body(text),
            )

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise AssetDashTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        _logger.debug("%s %s -> %s", method, url, status)
        return result
