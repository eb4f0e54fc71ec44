"""Inyección de problemas recuperables.

Con probabilidad PROBLEM_PROBABILITY por tick sobrescribe una métrica
continua con un valor de su banda degradada, para que el camino de
curación se ejercite con regularidad.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..domain.models import DeviceKind, MetricSet
from ..domain.profiles import PROBLEM_PROBABILITY, VALUE_PRECISION, continuous_profiles
from .random_source import RandomValueGenerator

logger = logging.getLogger(__name__)


def maybe_inject(
    kind: DeviceKind,
    metrics: MetricSet,
    rng: RandomValueGenerator,
    probability: Optional[float] = None,
) -> MetricSet:
    """Inyecta (o no) un problema en una métrica elegida al azar.

    Returns:
        Las mismas métricas si no hay inyección, o una copia con la
        métrica degradada.
    """
    p = PROBLEM_PROBABILITY if probability is None else probability
    if not rng.chance(p):
        return metrics

    profile = rng.choice(continuous_profiles(kind))
    low, high = profile.degraded_range
    value = profile.clamp(rng.uniform(low, high, VALUE_PRECISION))

    logger.debug("[INJECT] %s %s -> %.1f", DeviceKind(kind).value, profile.name, value)
    return replace(metrics, **{profile.name: value})
