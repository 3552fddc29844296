"""Power history endpoint: /api/power/{id}."""

from __future__ import annotations

from assetdash._api._common import parse_model, resource_path
from assetdash._transport import Transport
from assetdash.models.power import PowerHistory

POWER_ENDPOINT = "/api/power"


async def fetch_power(transport: Transport, asset_id: str) -> PowerHistory:
    endpoint = resource_path(POWER_ENDPOINT, asset_id)
    data = await transport.get_json(endpoint)
    return parse_model(PowerHistory, data, endpoint=endpoint)
