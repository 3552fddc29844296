"""Asset endpoints: /api/assets and /api/assets/{id}."""

from __future__ import annotations

from assetdash._api._common import parse_model, parse_model_list, resource_path
from assetdash._transport import Transport
from assetdash.models.asset import AssetRecord

ASSETS_ENDPOINT = "/api/assets"


async def fetch_assets(transport: Transport) -> list[AssetRecord]:
    """Fetch the full asset collection."""
    data = await transport.get_json(ASSETS_ENDPOINT)
    return parse_model_list(AssetRecord, data, endpoint=ASSETS_ENDPOINT)


async def fetch_asset(transport: Transport, asset_id: str) -> AssetRecord:
    """Fetch a single asset. Raises :class:`AssetNotFoundError` on 404."""
    endpoint = resource_path(ASSETS_ENDPOINT, asset_id)
    data = await transport.get_json(endpoint)
    return parse_model(AssetRecord, data, endpoint=endpoint)
