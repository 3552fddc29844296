"""Configuration endpoints.

- ``GET /api/configuration/{id}``: stored configuration, 404 when none
- ``GET /api/configurations``: every stored configuration
- ``POST /api/configuration``: save, echoing the stored configuration
"""

from __future__ import annotations

import logging
from typing import Any

from assetdash._api._common import parse_model, resource_path
from assetdash._constants import UNEXPECTED_ERROR_MESSAGE
from assetdash._transport import Transport
from assetdash.exceptions import AssetDashTransportError, ConfigurationValidationError
from assetdash.models.configuration import AssetConfiguration, ConfigurationList

_logger = logging.getLogger(__name__)

CONFIGURATION_ENDPOINT = "/api/configuration"
CONFIGURATIONS_ENDPOINT = "/api/configurations"

# Status codes the server uses for rejected configuration bodies.
_VALIDATION_STATUSES: frozenset[int] = frozenset({400, 422})


def validation_messages(body: Any) -> list[str]:
    """Flatten a validation error body into human-readable messages.

    Accepts both shapes the server produces::

        {"detail": "Invalid email"}
        {"detail": [{"msg": "Field required", "loc": ["body", "name"]}, ...]}

    Anything else yields a single generic message.
    """
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return [detail]
    if isinstance(detail, list):
        messages: list[str] = []
        for item in detail:
            if isinstance(item, dict) and item.get("msg"):
                messages.append(str(item["msg"]))
            else:
                messages.append(str(item))
        if messages:
            return messages
    return [UNEXPECTED_ERROR_MESSAGE]


async def fetch_configuration(transport: Transport, asset_id: str) -> AssetConfiguration:
    """Fetch the stored configuration. Raises :class:`AssetNotFoundError` when none exists."""
    endpoint = resource_path(CONFIGURATION_ENDPOINT, asset_id)
    data = await transport.get_json(endpoint)
    return parse_model(AssetConfiguration, data, endpoint=endpoint)


async def fetch_configurations(transport: Transport) -> ConfigurationList:
    data = await transport.get_json(CONFIGURATIONS_ENDPOINT)
    return parse_model(ConfigurationList, data, endpoint=CONFIGURATIONS_ENDPOINT)


async def save_configuration(transport: Transport, config: AssetConfiguration) -> AssetConfiguration:
    """Save *config* and return the server's echo.

    Raises :class:`ConfigurationValidationError` with normalized messages
    when the server rejects the body.
    """
    try:
        data = await transport.post_json(CONFIGURATION_ENDPOINT, config.to_payload())
    except AssetDashTransportError as exc:
        if exc.status_code in _VALIDATION_STATUSES:
            messages = validation_messages(exc.body)
            _logger.debug("Configuration save for %s rejected: %s", config.asset_id, messages)
            raise ConfigurationValidationError(
                messages,
                status_code=exc.status_code,
                endpoint=CONFIGURATION_ENDPOINT,
                body=exc.body,
            ) from exc
        raise
    return parse_model(AssetConfiguration, data, endpoint=CONFIGURATION_ENDPOINT)
