"""Modelos de dominio y tabla de perfiles."""

from .models import (
    CapacitorStatus,
    DefibrillatorMetrics,
    DeviceKind,
    DeviceState,
    FirmwareStatus,
    LogEntry,
    MetricSet,
    Status,
    VentilatorMetrics,
    metrics_as_dict,
)
from .profiles import (
    BinaryProfile,
    Direction,
    MetricProfile,
    PROBLEM_PROBABILITY,
    binary_profile,
    continuous_metric_names,
    continuous_profiles,
    get_profile,
)

__all__ = [
    "CapacitorStatus",
    "DefibrillatorMetrics",
    "DeviceKind",
    "DeviceState",
    "FirmwareStatus",
    "LogEntry",
    "MetricSet",
    "Status",
    "VentilatorMetrics",
    "metrics_as_dict",
    "BinaryProfile",
    "Direction",
    "MetricProfile",
    "PROBLEM_PROBABILITY",
    "binary_profile",
    "continuous_metric_names",
    "continuous_profiles",
    "get_profile",
]
