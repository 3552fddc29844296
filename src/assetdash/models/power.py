"""Power history model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, NamedTuple

from pydantic import Field

from assetdash.models._base import DashBaseModel, Timestamp


class PowerDataPoint(DashBaseModel):
    timestamp: Timestamp
    power_kw: float = 0.0
    efficiency: float = 0.0


class ChartPoint(NamedTuple):
    timestamp: datetime
    power_kw: float
    efficiency: float
    forecast: bool


class PowerHistory(DashBaseModel):
    """Power and efficiency series returned by ``GET /api/power/{id}``."""

    asset_id: str
    asset_name: str = ""
    asset_type: str = ""
    history: list[PowerDataPoint] = Field(default_factory=list)
    forecast: list[PowerDataPoint] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def chart_points(self) -> list[ChartPoint]:
        """History followed by forecast, each point tagged with its origin."""
        points = [ChartPoint(p.timestamp, p.power_kw, p.efficiency, False) for p in self.history]
        points.extend(ChartPoint(p.timestamp, p.power_kw, p.efficiency, True) for p in self.forecast)
        return points
