"""Shared helpers for dashboard API endpoint modules.

It is internal to assetdash and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from assetdash.exceptions import AssetDashParseError

TModel = TypeVar("TModel", bound=BaseModel)


def resource_path(prefix: str, resource_id: str) -> str:
    """Join *prefix* and a URL-quoted id, e.g. ``/api/assets/P%2F1``."""
    resource_id = resource_id.strip()
    if not resource_id:
        raise ValueError("resource id must be non-empty")
    return f"{prefix}/{quote(resource_id, safe='')}"


def parse_model(model_cls: type[TModel], data: Any, *, endpoint: str) -> TModel:
    """Validate *data* into *model_cls*, mapping failures to :class:`AssetDashParseError`."""
    if not isinstance(data, dict):
        raise AssetDashParseError(
            f"Expected a JSON object from {endpoint}, got {type(data).__name__}",
            endpoint=endpoint,
        )
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise AssetDashParseError(f"Unexpected payload from {endpoint}: {exc}", endpoint=endpoint) from exc


def parse_model_list(model_cls: type[TModel], data: Any, *, endpoint: str) -> list[TModel]:
    if not isinstance(data, list):
        raise AssetDashParseError(
            f"Expected a JSON array from {endpoint}, got {type(data).__name__}",
            endpoint=endpoint,
        )
    return [parse_model(model_cls, item, endpoint=endpoint) for item in data]
