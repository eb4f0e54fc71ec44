"""Excepciones del simulador."""

from __future__ import annotations


class SimulationError(Exception):
    """Error base del simulador."""


class InvalidDeviceState(SimulationError):
    """El estado previo viola el contrato de su tipo de dispositivo.

    Nunca se sustituyen valores por defecto.
    """

    def __init__(self, device_id: str, reason: str):
        self.device_id = device_id
        self.reason = reason
        super().__init__(f"Invalid state for device '{device_id}': {reason}")
