"""Asset model."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from assetdash.models._base import DashBaseModel, Timestamp

#: AssetRecord fields a table can be sorted by.
AssetSortKey = Literal["id", "name", "type", "location", "status", "last_updated"]

SORTABLE_FIELDS: tuple[str, ...] = ("name", "type", "location", "status", "last_updated", "id")


class AssetRecord(DashBaseModel):
    """A monitored asset as listed by ``GET /api/assets``."""

    id: str
    """Stable unique asset identifier."""
    name: str = ""
    """Display name (e.g. ``"Pump 7"``)."""
    type: str = ""
    """Category tag (e.g. ``"pump"``, ``"compressor"``)."""
    location: str = ""
    """Site or area label."""
    status: str = ""
    """Status tag (e.g. ``"operational"``, ``"standby"``, ``"maintenance"``)."""
    last_updated: Timestamp | None = Field(default=None)
    """Server-side modification time."""

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, value: str) -> str:
        asset_id = value.strip()
        if not asset_id:
            raise ValueError("id must be non-empty")
        return asset_id
