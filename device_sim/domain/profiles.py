"""Tabla canónica de perfiles por (tipo de dispositivo, métrica).

SSOT: motor, mensajes de notificación y API leen los umbrales de aquí.
Ningún otro módulo define warning/critical por su cuenta.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from .models import CapacitorStatus, DeviceKind, FirmwareStatus

# Probabilidad por tick de inyectar un problema recuperable
PROBLEM_PROBABILITY = 0.1

# Decimales de los valores continuos
VALUE_PRECISION = 1


class Direction(str, Enum):
    """Sentido en que una métrica empeora."""

    HIGHER = "higher"  # mayor = peor (temperatura)
    LOWER = "lower"  # menor = peor (oxígeno, batería)
    MAGNITUDE = "magnitude"  # |valor| mayor = peor (ECG)


@dataclass(frozen=True)
class MetricProfile:
    """Perfil de una métrica continua."""

    name: str
    label: str
    unit: str
    min_value: float
    max_value: float
    max_step: float
    initial_range: Tuple[float, float]
    degraded_range: Tuple[float, float]
    warning: float
    critical: float
    direction: Direction
    healing_target: float
    healing_rate: float
    alert_label: str
    healing_margin: float = 1.0

    @property
    def reversed(self) -> bool:
        return self.direction == Direction.LOWER

    def observed(self, value: float) -> float:
        """Valor que se compara contra los umbrales."""
        if self.direction == Direction.MAGNITUDE:
            return abs(value)
        return value

    def is_critical(self, value: float) -> bool:
        v = self.observed(value)
        if self.reversed:
            return v <= self.critical
        return v >= self.critical

    def is_warning(self, value: float) -> bool:
        """True si el valor está en/por encima del umbral WARNING (incluye crítico)."""
        v = self.observed(value)
        if self.reversed:
            return v <= self.warning
        return v >= self.warning

    def clamp(self, value: float) -> float:
        return max(self.min_value, min(self.max_value, value))


@dataclass(frozen=True)
class BinaryProfile:
    """Perfil de un campo binario (sin curación continua posible)."""

    name: str
    label: str
    good: Enum
    bad: Enum
    toggle_probability: float
    alert_label: str

    def is_bad(self, value: Enum) -> bool:
        return value == self.bad

    def toggled(self, value: Enum) -> Enum:
        return self.good if value == self.bad else self.bad


CONTINUOUS_PROFILES: Dict[DeviceKind, Tuple[MetricProfile, ...]] = {
    DeviceKind.VENTILATOR: (
        MetricProfile(
            name="temperature", label="Temperature", unit="°C",
            min_value=20.0, max_value=45.0, max_step=0.3,
            initial_range=(25.0, 35.0), degraded_range=(38.0, 39.5),
            warning=38.0, critical=40.0, direction=Direction.HIGHER,
            healing_target=36.0, healing_rate=0.5,
            alert_label="High Temperature",
        ),
        MetricProfile(
            name="pressure", label="Pressure", unit="cmH₂O",
            min_value=5.0, max_value=50.0, max_step=0.3,
            initial_range=(10.0, 25.0), degraded_range=(30.0, 34.0),
            warning=35.0, critical=40.0, direction=Direction.HIGHER,
            healing_target=28.0, healing_rate=0.5,
            alert_label="High Pressure",
        ),
        MetricProfile(
            name="oxygen_level", label="Oxygen Level", unit="%",
            min_value=80.0, max_value=100.0, max_step=0.2,
            initial_range=(92.0, 98.0), degraded_range=(86.0, 89.0),
            warning=88.0, critical=85.0, direction=Direction.LOWER,
            healing_target=92.0, healing_rate=0.8,
            alert_label="Low Oxygen Level",
        ),
    ),
    DeviceKind.DEFIBRILLATOR: (
        MetricProfile(
            name="temperature", label="Device Temperature", unit="°C",
            min_value=25.0, max_value=50.0, max_step=0.3,
            initial_range=(30.0, 35.0), degraded_range=(39.0, 42.0),
            warning=40.0, critical=45.0, direction=Direction.HIGHER,
            healing_target=37.0, healing_rate=0.5,
            alert_label="High Temperature",
        ),
        MetricProfile(
            name="battery_voltage", label="Battery Voltage", unit="V",
            min_value=8.0, max_value=14.0, max_step=0.15,
            initial_range=(12.0, 13.5), degraded_range=(10.2, 10.8),
            warning=10.5, critical=10.0, direction=Direction.LOWER,
            healing_target=11.5, healing_rate=0.3,
            alert_label="Low Battery",
        ),
        MetricProfile(
            name="ecg_signal", label="ECG Signal", unit="mV",
            min_value=-1.0, max_value=1.0, max_step=0.2,
            initial_range=(-0.8, 0.8), degraded_range=(0.9, 1.0),
            warning=0.9, critical=1.0, direction=Direction.MAGNITUDE,
            healing_target=0.0, healing_rate=0.2,
            alert_label="Abnormal ECG Signal",
            # Con margen 1 la banda sería |ecg| >= -0.1: curación permanente
            healing_margin=0.1,
        ),
    ),
}

BINARY_PROFILES: Dict[DeviceKind, BinaryProfile] = {
    DeviceKind.VENTILATOR: BinaryProfile(
        name="firmware_status", label="Firmware Status",
        good=FirmwareStatus.RESPONSIVE, bad=FirmwareStatus.UNRESPONSIVE,
        toggle_probability=0.03, alert_label="Firmware Unresponsive",
    ),
    DeviceKind.DEFIBRILLATOR: BinaryProfile(
        name="capacitor_status", label="Capacitor Readiness",
        good=CapacitorStatus.READY, bad=CapacitorStatus.NOT_READY,
        toggle_probability=0.05, alert_label="Capacitor Not Ready",
    ),
}


def continuous_profiles(kind: DeviceKind) -> Tuple[MetricProfile, ...]:
    return CONTINUOUS_PROFILES[DeviceKind(kind)]


def binary_profile(kind: DeviceKind) -> BinaryProfile:
    return BINARY_PROFILES[DeviceKind(kind)]


def get_profile(kind: DeviceKind, name: str) -> MetricProfile:
    """Obtiene el perfil de una métrica continua.

    Raises:
        KeyError: si la métrica no existe para ese tipo de dispositivo
    """
    for profile in continuous_profiles(kind):
        if profile.name == name:
            return profile
    raise KeyError(f"Unknown metric '{name}' for {DeviceKind(kind).value}")


def continuous_metric_names(kind: DeviceKind) -> FrozenSet[str]:
    return frozenset(p.name for p in continuous_profiles(kind))
