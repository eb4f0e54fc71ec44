"""Clasificador de estado del dispositivo.

Orden de evaluación (gana la primera coincidencia):
1. EMERGENCY: alguna métrica en/más allá de su umbral crítico.
   La curación no lo enmascara.
2. ALERT: alguna métrica en/más allá de WARNING y fuera del conjunto de
   curación, o un campo binario en su estado malo.
3. HEALING: conjunto de curación no vacío.
4. NORMAL: resto.

Los campos binarios solo contribuyen a ALERT, nunca a EMERGENCY.
"""

from __future__ import annotations

from typing import FrozenSet

from ..domain.models import DeviceKind, MetricSet, Status
from ..domain.profiles import binary_profile, continuous_profiles


def classify(kind: DeviceKind, metrics: MetricSet, healing: FrozenSet[str]) -> Status:
    """Función pura de (métricas, curación) a Status."""
    profiles = continuous_profiles(kind)

    if any(p.is_critical(getattr(metrics, p.name)) for p in profiles):
        return Status.EMERGENCY

    for p in profiles:
        if p.is_warning(getattr(metrics, p.name)) and p.name not in healing:
            return Status.ALERT

    binary = binary_profile(kind)
    if binary.is_bad(getattr(metrics, binary.name)):
        return Status.ALERT

    if healing:
        return Status.HEALING

    return Status.NORMAL
