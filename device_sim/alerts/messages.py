"""Mensajes legibles para el feed de diagnóstico y las notificaciones."""

from __future__ import annotations

from ..domain.models import DeviceKind, MetricSet, Status
from ..domain.profiles import binary_profile, continuous_profiles

STATUS_MESSAGES = {
    DeviceKind.VENTILATOR: {
        Status.NORMAL: "Ventilator operating normally",
        Status.HEALING: "Ventilator self-healing initiated - adjusting parameters",
        Status.ALERT: "Ventilator requires technician attention",
        Status.EMERGENCY: "CRITICAL: Ventilator system emergency - backup system activated",
    },
    DeviceKind.DEFIBRILLATOR: {
        Status.NORMAL: "Defibrillator ready for use",
        Status.HEALING: "Defibrillator self-correction in progress",
        Status.ALERT: "Defibrillator maintenance required",
        Status.EMERGENCY: "CRITICAL: Defibrillator malfunction detected",
    },
}

UNKNOWN_ISSUE = "Unknown Issue"


def status_message(kind: DeviceKind, status: Status) -> str:
    return STATUS_MESSAGES[DeviceKind(kind)][Status(status)]


def describe_issue(kind: DeviceKind, metrics: MetricSet) -> str:
    """Motivo principal de la alerta para el técnico.

    Primera métrica continua en/más allá de WARNING (orden de la tabla),
    luego el campo binario en estado malo.
    """
    for profile in continuous_profiles(kind):
        if profile.is_warning(getattr(metrics, profile.name)):
            return profile.alert_label

    binary = binary_profile(kind)
    if binary.is_bad(getattr(metrics, binary.name)):
        return binary.alert_label

    return UNKNOWN_ISSUE
