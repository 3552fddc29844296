"""Telemetry models: the latest reading per asset and the push envelope."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from assetdash.models._base import DashBaseModel, Timestamp


class TelemetryRecord(DashBaseModel):
    """Latest sensor readings for one asset."""

    asset_id: str
    timestamp: Timestamp
    temperature: float = 0.0
    """Temperature in °C."""
    pressure: float = 0.0
    """Pressure in psi."""
    vibration: float = 0.0
    """Vibration level (unitless RMS)."""
    power_consumption: float = 0.0
    """Power draw in kW."""
    status: str = ""


class TelemetryUpdateMessage(BaseModel):
    """Envelope of a ``telemetry_update`` push message.

    Entries of ``data`` are kept raw; the reconciler validates only the
    entry it is interested in so one bad entry cannot spoil a batch.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: Literal["telemetry_update"]
    timestamp: Any = None
    data: list[Any] = Field(...)
