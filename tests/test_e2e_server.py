"""End-to-end tests against a local aiohttp server.

These exercise the real HTTP transport and the WebSocket push channel.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from assetdash import AssetDashClient, AssetDetailView, DashboardConfig, DashboardView
from assetdash.cache import QueryCache
from assetdash.exceptions import AssetDashTransportError, AssetNotFoundError, ConfigurationValidationError
from assetdash.models import AssetConfiguration, TelemetryRecord

_ASSETS = [
    {"id": "PUMP-2", "name": "Pump 2", "type": "pump", "location": "Plant A", "status": "operational"},
    {"id": "PUMP-10", "name": "Pump 10", "type": "pump", "location": "Plant B", "status": "standby"},
    {"id": "CMP-1", "name": "Compressor 1", "type": "compressor", "location": "Plant A", "status": "maintenance"},
]


def _telemetry(asset_id: str, temperature: float) -> dict[str, Any]:
    return {
        "asset_id": asset_id,
        "timestamp": "2026-01-01T00:00:00Z",
        "temperature": temperature,
        "pressure": 100.0,
        "vibration": 0.3,
        "power_consumption": 12.5,
        "status": "operational",
    }


class _DashboardServer:
    def __init__(self) -> None:
        self.configurations: dict[str, dict[str, Any]] = {}
        self.push_frames: list[str] = []
        self.ws_clients = 0
        self.ws_closed = asyncio.Event()

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/assets", self.assets)
        app.router.add_get("/api/assets/{asset_id}", self.asset)
        app.router.add_get("/api/telemetry/{asset_id}", self.telemetry)
        app.router.add_get("/api/configuration/{asset_id}", self.configuration)
        app.router.add_post("/api/configuration", self.save)
        app.router.add_get("/api/broken", self.broken)
        app.router.add_get("/ws/telemetry", self.websocket)
        return app

    async def assets(self, request: web.Request) -> web.Response:
        return web.json_response(_ASSETS)

    async def asset(self, request: web.Request) -> web.Response:
        asset_id = request.match_info["asset_id"]
        for asset in _ASSETS:
            if asset["id"] == asset_id:
                return web.json_response(asset)
        return web.json_response({"detail": "Asset not found"}, status=404)

    async def telemetry(self, request: web.Request) -> web.Response:
        return web.json_response(_telemetry(request.match_info["asset_id"], 20.0))

    async def configuration(self, request: web.Request) -> web.Response:
        stored = self.configurations.get(request.match_info["asset_id"])
        if stored is None:
            return web.json_response({"detail": "Configuration not found"}, status=404)
        return web.json_response(stored)

    async def save(self, request: web.Request) -> web.Response:
        body = await request.json()
        if body.get("maintenance_interval_days", 0) < 1:
            return web.json_response(
                {"detail": [{"msg": "Input should be greater than 0", "loc": ["body", "maintenance_interval_days"]}]},
                status=422,
            )
        self.configurations[body["asset_id"]] = body
        return web.json_response(body)

    async def broken(self, request: web.Request) -> web.Response:
        return web.Response(text="<html>oops</html>", content_type="text/html")

    async def websocket(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self.ws_clients += 1
        for frame in self.push_frames:
            await ws.send_str(frame)
        async for _ in ws:
            pass
        self.ws_closed.set()
        return ws


@pytest_asyncio.fixture
async def server() -> AsyncIterator[tuple[_DashboardServer, str]]:
    dashboard = _DashboardServer()
    test_server = test_utils.TestServer(dashboard.app(), host="127.0.0.1")
    await test_server.start_server()
    try:
        yield dashboard, str(test_server.make_url("/"))
    finally:
        await test_server.close()


def _client(base_url: str, **overrides: Any) -> AssetDashClient:
    return AssetDashClient(DashboardConfig(base_url=base_url, request_timeout=5.0, **overrides), cache=QueryCache())


@pytest.mark.asyncio
async def test_dashboard_over_http(server: tuple[_DashboardServer, str]) -> None:
    _, base_url = server
    async with _client(base_url, live_enabled=False) as client:
        dashboard = DashboardView(client)
        assert await dashboard.refresh()

    assert [r.name for r in dashboard.view.page] == ["Compressor 1", "Pump 2", "Pump 10"]
    assert dashboard.selected_id == "CMP-1"
    assert [r.id for r in dashboard.search("PUMP").page] == ["PUMP-2", "PUMP-10"]


@pytest.mark.asyncio
async def test_http_error_mapping(server: tuple[_DashboardServer, str]) -> None:
    _, base_url = server
    async with _client(base_url, live_enabled=False) as client:
        with pytest.raises(AssetNotFoundError) as not_found:
            await client.get_asset("MISSING")
        assert not_found.value.body == {"detail": "Asset not found"}

        assert await client.get_configuration("PUMP-2") is None

        transport = client._require_transport()
        with pytest.raises(AssetDashTransportError, match="Invalid JSON"):
            await transport.get_json("/api/broken")


@pytest.mark.asyncio
async def test_configuration_round_trip(server: tuple[_DashboardServer, str]) -> None:
    dashboard, base_url = server
    async with _client(base_url, live_enabled=False) as client:
        with pytest.raises(ConfigurationValidationError) as rejected:
            await client.save_configuration(AssetConfiguration(asset_id="PUMP-2", maintenance_interval_days=0))
        assert rejected.value.messages == ["Input should be greater than 0"]

        saved = await client.save_configuration(AssetConfiguration(asset_id="PUMP-2", notes="checked"))
        assert saved.notes == "checked"
        assert dashboard.configurations["PUMP-2"]["priority"] == "medium"

        stored = await client.get_configuration("PUMP-2")
        assert stored == saved


@pytest.mark.asyncio
async def test_unreachable_server_is_transport_error() -> None:
    async with _client("http://127.0.0.1:9", live_enabled=False) as client:
        with pytest.raises(AssetDashTransportError):
            await client.get_assets()


@pytest.mark.asyncio
async def test_live_overlay_over_websocket(server: tuple[_DashboardServer, str]) -> None:
    dashboard, base_url = server
    dashboard.push_frames = [
        "not json",
        json.dumps({"type": "alarm", "data": [_telemetry("PUMP-2", 99.0)]}),
        json.dumps({"type": "telemetry_update", "data": [_telemetry("CMP-1", 50.0)]}),
        json.dumps({"type": "telemetry_update", "data": [_telemetry("CMP-1", 51.0), _telemetry("PUMP-2", 77.0)]}),
    ]
    updated = asyncio.Event()
    seen: list[TelemetryRecord] = []

    def _on_update(record: TelemetryRecord) -> None:
        seen.append(record)
        updated.set()

    async with _client(base_url) as client:
        async with AssetDetailView(client, "PUMP-2", on_live_update=_on_update) as detail:
            assert detail.baseline is not None
            await asyncio.wait_for(updated.wait(), timeout=5)

            assert detail.is_live
            assert detail.telemetry is not None
            assert detail.telemetry.temperature == 77.0
            assert detail.baseline.temperature == 20.0

        await asyncio.wait_for(dashboard.ws_closed.wait(), timeout=5)

    assert dashboard.ws_clients == 1
    assert [r.temperature for r in seen] == [77.0]
