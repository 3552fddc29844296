"""Data models for dashboard API payloads."""

from assetdash.models._base import DashBaseModel, Timestamp, parse_timestamp
from assetdash.models.asset import SORTABLE_FIELDS, AssetRecord, AssetSortKey
from assetdash.models.configuration import (
    AssetConfiguration,
    ConfigurationList,
    MaintenanceMode,
    OperatingMode,
    Priority,
)
from assetdash.models.power import ChartPoint, PowerDataPoint, PowerHistory
from assetdash.models.telemetry import TelemetryRecord, TelemetryUpdateMessage

__all__ = [
    "AssetConfiguration",
    "AssetRecord",
    "AssetSortKey",
    "ChartPoint",
    "ConfigurationList",
    "DashBaseModel",
    "MaintenanceMode",
    "OperatingMode",
    "PowerDataPoint",
    "PowerHistory",
    "Priority",
    "SORTABLE_FIELDS",
    "TelemetryRecord",
    "TelemetryUpdateMessage",
    "Timestamp",
    "parse_timestamp",
]
