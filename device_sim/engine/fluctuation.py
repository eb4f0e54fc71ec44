"""Modelo de fluctuación: paseo aleatorio acotado por métrica."""

from __future__ import annotations

from ..domain.profiles import VALUE_PRECISION, MetricProfile
from .random_source import RandomValueGenerator


def fluctuate(
    current: float,
    min_value: float,
    max_value: float,
    max_step: float,
    rng: RandomValueGenerator,
) -> float:
    """Avanza una métrica un paso aleatorio acotado.

    Args:
        current: Valor previo
        min_value: Límite físico inferior
        max_value: Límite físico superior
        max_step: Cambio máximo por tick (en valor absoluto)
        rng: Fuente aleatoria

    Returns:
        Nuevo valor en [min_value, max_value] con un decimal
    """
    value = current + rng.delta(max_step)
    value = max(min_value, min(max_value, value))
    return round(value, VALUE_PRECISION)


def fluctuate_metric(profile: MetricProfile, current: float, rng: RandomValueGenerator) -> float:
    return fluctuate(current, profile.min_value, profile.max_value, profile.max_step, rng)
