from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

import pytest

from assetdash.exceptions import AssetDashTransportError, AssetNotFoundError


def asset_payload(asset_id: str, name: str, status: str = "operational", asset_type: str = "pump") -> dict[str, Any]:
    return {
        "id": asset_id,
        "name": name,
        "type": asset_type,
        "location": "Plant A",
        "status": status,
        "last_updated": "2026-01-01T00:00:00Z",
    }


def telemetry_payload(asset_id: str, temperature: float = 20.0) -> dict[str, Any]:
    return {
        "asset_id": asset_id,
        "timestamp": "2026-01-01T00:00:00Z",
        "temperature": temperature,
        "pressure": 110.0,
        "vibration": 0.1,
        "power_consumption": 35.0,
        "status": "operational",
    }


class FakeBackend:
    """In-memory dashboard API served through a patched ``HttpTransport``."""

    def __init__(self) -> None:
        self.assets: list[dict[str, Any]] = [
            asset_payload("A2", "Zeta", "standby", "compressor"),
            asset_payload("A1", "Alpha"),
            asset_payload("A3", "Mid", "maintenance", "turbine"),
        ]
        self.telemetry: dict[str, dict[str, Any]] = {a["id"]: telemetry_payload(a["id"]) for a in self.assets}
        self.configurations: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[str, AssetDashTransportError] = {}

    def count(self, method: str, endpoint: str) -> int:
        return self.calls.count((method, endpoint))

    def fail(self, endpoint: str, status_code: int = 500, body: Any = None) -> None:
        self.failures[endpoint] = AssetDashTransportError(
            f"HTTP {status_code} from {endpoint}",
            status_code=status_code,
            endpoint=endpoint,
            body=body,
        )

    def _not_found(self, endpoint: str) -> AssetNotFoundError:
        return AssetNotFoundError(f"HTTP 404 from {endpoint}", status_code=404, endpoint=endpoint)

    def get(self, endpoint: str) -> Any:
        self.calls.append(("GET", endpoint))
        if endpoint in self.failures:
            raise self.failures[endpoint]

        prefix, _, resource = endpoint.rpartition("/")
        resource = unquote(resource)
        if endpoint == "/api/assets":
            return list(self.assets)
        if endpoint == "/api/configurations":
            items = list(self.configurations.values())
            return {"configurations": items, "count": len(items)}
        if prefix == "/api/assets":
            for asset in self.assets:
                if asset["id"] == resource:
                    return asset
            raise self._not_found(endpoint)
        if prefix == "/api/telemetry" and resource in self.telemetry:
            return self.telemetry[resource]
        if prefix == "/api/power" and resource in self.telemetry:
            return {
                "asset_id": resource,
                "history": [{"timestamp": "2026-01-01T00:00:00Z", "power_kw": 30.0, "efficiency": 90.0}],
                "forecast": [{"timestamp": "2026-01-01T01:00:00Z", "power_kw": 31.0, "efficiency": 89.0}],
            }
        if prefix == "/api/configuration" and resource in self.configurations:
            return self.configurations[resource]
        raise self._not_found(endpoint)

    def post(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        self.calls.append(("POST", endpoint))
        if endpoint in self.failures:
            raise self.failures[endpoint]
        if "@" not in str(payload.get("alert_email") or "@"):
            raise AssetDashTransportError(
                "HTTP 422 from /api/configuration",
                status_code=422,
                endpoint=endpoint,
                body={"detail": [{"msg": "Invalid email", "loc": ["body", "alert_email"]}]},
            )
        stored = dict(payload)
        self.configurations[stored["asset_id"]] = stored
        return stored


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()

    async def _get_json(self: object, endpoint: str) -> Any:
        return fake.get(endpoint)

    async def _post_json(self: object, endpoint: str, payload: Mapping[str, Any]) -> Any:
        return fake.post(endpoint, payload)

    monkeypatch.setattr("assetdash._transport.HttpTransport.get_json", _get_json)
    monkeypatch.setattr("assetdash._transport.HttpTransport.post_json", _post_json)
    return fake
