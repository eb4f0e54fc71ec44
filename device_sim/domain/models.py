"""Modelos de dominio del simulador de dispositivos.

Dataclasses inmutables: cada tick produce un DeviceState nuevo,
nunca se modifica el anterior.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Union


class DeviceKind(str, Enum):
    """Tipo de dispositivo simulado."""

    VENTILATOR = "ventilator"
    DEFIBRILLATOR = "defibrillator"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Status(str, Enum):
    """Estado operacional derivado. Nunca se asigna directamente."""

    NORMAL = "normal"
    HEALING = "healing"
    ALERT = "alert"
    EMERGENCY = "emergency"


class FirmwareStatus(str, Enum):
    RESPONSIVE = "responsive"
    UNRESPONSIVE = "unresponsive"


class CapacitorStatus(str, Enum):
    READY = "ready"
    NOT_READY = "not_ready"


@dataclass(frozen=True)
class VentilatorMetrics:
    """Telemetría del ventilador."""

    temperature: float  # °C
    pressure: float  # cmH2O
    oxygen_level: float  # %
    firmware_status: FirmwareStatus = FirmwareStatus.RESPONSIVE


@dataclass(frozen=True)
class DefibrillatorMetrics:
    """Telemetría del desfibrilador."""

    temperature: float  # °C
    battery_voltage: float  # V
    ecg_signal: float  # mV
    capacitor_status: CapacitorStatus = CapacitorStatus.READY


MetricSet = Union[VentilatorMetrics, DefibrillatorMetrics]

METRICS_TYPE_BY_KIND = {
    DeviceKind.VENTILATOR: VentilatorMetrics,
    DeviceKind.DEFIBRILLATOR: DefibrillatorMetrics,
}


def metrics_as_dict(metrics: MetricSet) -> dict:
    """Serializa las métricas a un dict plano (enums como str)."""
    out = {}
    for f in fields(metrics):
        value = getattr(metrics, f.name)
        out[f.name] = value.value if isinstance(value, Enum) else value
    return out


@dataclass(frozen=True)
class DeviceState:
    """Estado completo de un dispositivo en un tick."""

    id: str
    kind: DeviceKind
    metrics: MetricSet
    status: Status
    last_updated: datetime
    healing: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_healing(self) -> bool:
        return bool(self.healing)


@dataclass(frozen=True)
class LogEntry:
    """Entrada del feed de diagnóstico, emitida en cambios de estado."""

    id: str
    device: str
    message: str
    status: Status
    timestamp: datetime
