"""Auto-curación de métricas.

- needs_healing: predicado puro sobre valor y umbrales
- heal_value: un paso acotado hacia el objetivo, sin sobrepasarlo
- apply_healing: aplica ambos a todas las métricas continuas y
  mantiene el conjunto de métricas en curación

Banda de curación (mayor = peor): [warning - 1, critical).
Banda de curación (menor = peor): (critical, warning + 1].
En o más allá del crítico nunca se cura: escala a emergencia.
"""

from __future__ import annotations

from dataclasses import replace
from typing import FrozenSet, Tuple

from ..domain.models import DeviceKind, MetricSet
from ..domain.profiles import (
    VALUE_PRECISION,
    MetricProfile,
    continuous_metric_names,
    continuous_profiles,
)

HEALING_MARGIN = 1.0


def needs_healing(
    value: float,
    warning: float,
    critical: float,
    reversed: bool = False,
    margin: float = HEALING_MARGIN,
) -> bool:
    """Indica si la métrica está en la banda anormal pero recuperable."""
    if reversed:
        return value <= warning + margin and value > critical
    return value >= warning - margin and value < critical


def metric_needs_healing(profile: MetricProfile, value: float) -> bool:
    """needs_healing sobre el perfil. Una métrica ya en su objetivo no se cura."""
    if value == profile.healing_target:
        return False
    return needs_healing(
        profile.observed(value),
        profile.warning,
        profile.critical,
        profile.reversed,
        profile.healing_margin,
    )


def heal_value(value: float, target: float, rate: float) -> float:
    """Mueve `value` como mucho `rate` hacia `target`."""
    if value < target:
        value = min(value + rate, target)
    elif value > target:
        value = max(value - rate, target)
    return round(value, VALUE_PRECISION)


def apply_healing(
    kind: DeviceKind,
    metrics: MetricSet,
    healing: FrozenSet[str],
) -> Tuple[MetricSet, FrozenSet[str]]:
    """Aplica un tick de curación.

    La necesidad se evalúa con el valor previo a la curación: una métrica
    que entra en la banda segura en este tick sigue en el conjunto y sale
    en el siguiente.

    Returns:
        (métricas curadas, nuevo conjunto de curación)
    """
    updates = {}
    active = set(healing)

    for profile in continuous_profiles(kind):
        value = getattr(metrics, profile.name)
        if metric_needs_healing(profile, value):
            updates[profile.name] = profile.clamp(
                heal_value(value, profile.healing_target, profile.healing_rate)
            )
            active.add(profile.name)
        else:
            active.discard(profile.name)

    healed = replace(metrics, **updates) if updates else metrics
    return healed, frozenset(active) & continuous_metric_names(kind)
