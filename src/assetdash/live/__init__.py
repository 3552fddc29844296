"""Live telemetry overlay on top of pulled baselines."""

from assetdash.live.channel import TelemetryChannel
from assetdash.live.reconciler import ChannelReconciler, LiveHandle, extract_subject_update

__all__ = [
    "ChannelReconciler",
    "LiveHandle",
    "TelemetryChannel",
    "extract_subject_update",
]
