"""Per-asset operating configuration models."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import Field

from assetdash.models._base import DashBaseModel

if TYPE_CHECKING:
    from assetdash.models.asset import AssetRecord


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class MaintenanceMode(StrEnum):
    SCHEDULED = "scheduled"
    PREDICTIVE = "predictive"
    REACTIVE = "reactive"


class OperatingMode(StrEnum):
    CONTINUOUS = "continuous"
    INTERMITTENT = "intermittent"
    ON_DEMAND = "on_demand"


class AssetConfiguration(DashBaseModel):
    """Operating limits and maintenance settings for one asset.

    Only field types are enforced here. Range rules are owned by the
    server, which answers a rejected save with a validation ``detail``.
    """

    asset_id: str
    name: str = ""
    priority: Priority = Priority.MEDIUM
    maintenance_mode: MaintenanceMode = MaintenanceMode.PREDICTIVE
    operating_mode: OperatingMode = OperatingMode.CONTINUOUS
    maintenance_interval_days: int = 30
    max_runtime_hours: int = 50000
    warning_threshold_percent: int = 85
    max_temperature_celsius: float = 80.0
    max_pressure_psi: float = 200.0
    efficiency_target_percent: float = 85.0
    power_factor: float = 0.95
    load_capacity_percent: float = 100.0
    alert_email: str = ""
    location: str = ""
    notes: str | None = None

    @classmethod
    def defaults_for(cls, asset_id: str, asset: AssetRecord | None = None) -> AssetConfiguration:
        """Form defaults for an asset that has no stored configuration."""
        if asset is None:
            return cls(asset_id=asset_id)
        return cls(asset_id=asset_id, name=asset.name, location=asset.location)

    def to_payload(self) -> dict:
        """JSON body for ``POST /api/configuration``."""
        return self.model_dump(mode="json", exclude={"raw"})


class ConfigurationList(DashBaseModel):
    configurations: list[AssetConfiguration] = Field(default_factory=list)
    count: int = 0
