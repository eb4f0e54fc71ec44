"""Simulador de telemetría de dispositivos de UCI (ventilador, desfibrilador).

Estructura modular:
- domain/: modelos inmutables y tabla canónica de umbrales
- engine/: motor de transición por tick
- alerts/: mensajes de estado y notificaciones al técnico
- monitoring/: driver de ticks y feed de diagnóstico
- endpoints/: API HTTP de solo lectura
"""

from .domain.models import DeviceKind, DeviceState, LogEntry, Status
from .engine.simulation_step import DeviceSimulator, create_initial, step
from .errors import InvalidDeviceState, SimulationError

__all__ = [
    "DeviceKind",
    "DeviceState",
    "LogEntry",
    "Status",
    "DeviceSimulator",
    "create_initial",
    "step",
    "InvalidDeviceState",
    "SimulationError",
]
