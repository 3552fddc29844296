"""Latest telemetry endpoint: /api/telemetry/{id}."""

from __future__ import annotations

from assetdash._api._common import parse_model, resource_path
from assetdash._transport import Transport
from assetdash.models.telemetry import TelemetryRecord

TELEMETRY_ENDPOINT = "/api/telemetry"


async def fetch_telemetry(transport: Transport, asset_id: str) -> TelemetryRecord:
    endpoint = resource_path(TELEMETRY_ENDPOINT, asset_id)
    data = await transport.get_json(endpoint)
    return parse_model(TelemetryRecord, data, endpoint=endpoint)
