"""assetdash - Async client core for an asset monitoring dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("assetdash")
except PackageNotFoundError:
    __version__ = "0+local"
from assetdash.cache import QueryCache, get_query_cache
from assetdash.client import AssetDashClient
from assetdash.config import DashboardConfig
from assetdash.exceptions import (
    AssetDashConfigError,
    AssetDashError,
    AssetDashParseError,
    AssetDashTransportError,
    AssetNotFoundError,
    ConfigurationValidationError,
)
from assetdash.live import ChannelReconciler, LiveHandle
from assetdash.models import (
    AssetConfiguration,
    AssetRecord,
    ConfigurationList,
    MaintenanceMode,
    OperatingMode,
    PowerHistory,
    Priority,
    TelemetryRecord,
)
from assetdash.selection import SelectionCoordinator, effective_selection
from assetdash.table import DerivedView, SortDirection, TableView, ViewState, derive_view
from assetdash.views import AssetDetailView, DashboardView, OverviewStats, overview_stats

__all__ = [
    "__version__",
    "AssetConfiguration",
    "AssetDashClient",
    "AssetDashConfigError",
    "AssetDashError",
    "AssetDashParseError",
    "AssetDashTransportError",
    "AssetDetailView",
    "AssetNotFoundError",
    "AssetRecord",
    "ChannelReconciler",
    "ConfigurationList",
    "ConfigurationValidationError",
    "DashboardConfig",
    "DashboardView",
    "DerivedView",
    "LiveHandle",
    "MaintenanceMode",
    "OperatingMode",
    "OverviewStats",
    "PowerHistory",
    "Priority",
    "QueryCache",
    "SelectionCoordinator",
    "SortDirection",
    "TableView",
    "TelemetryRecord",
    "ViewState",
    "derive_view",
    "effective_selection",
    "get_query_cache",
    "overview_stats",
]
