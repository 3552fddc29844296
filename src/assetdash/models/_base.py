"""Base model for dashboard API payloads.

Every wire model inherits from :class:`DashBaseModel` which provides:

* frozen instances, so a fetched snapshot is never mutated in place;
* ``extra="ignore"`` so new server fields do not break parsing;
* a ``model_validator(mode="before")`` that drops ``None`` values so
  field defaults apply;
* a ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> Any:
    """Coerce epoch seconds/milliseconds to a UTC datetime.

    ISO-8601 strings are left for pydantic to parse. Naive results are
    treated as UTC by :class:`DashBaseModel`.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    return value


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated datetime accepting ISO-8601 strings or epoch numbers."""


class DashBaseModel(BaseModel):
    """Base for dashboard API models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicitly passed raw= as is.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned

    @model_validator(mode="after")
    def _normalise_timestamps(self) -> DashBaseModel:
        for name in type(self).model_fields:
            value = getattr(self, name, None)
            if isinstance(value, datetime) and value.tzinfo is None:
                object.__setattr__(self, name, _ensure_utc(value))
        return self
