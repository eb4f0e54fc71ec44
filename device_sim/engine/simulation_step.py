"""Paso de simulación: estado previo -> estado nuevo.

Orden por tick:
(a) fluctuación de métricas continuas
(b) conmutación de campos binarios
(c) inyección de problemas
(d) curación
(e) clasificación de estado
(f) timestamp
(g) DeviceState nuevo (el previo nunca se modifica)
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from ..domain.models import METRICS_TYPE_BY_KIND, DeviceKind, DeviceState, Status
from ..domain.profiles import (
    VALUE_PRECISION,
    binary_profile,
    continuous_metric_names,
    continuous_profiles,
)
from ..errors import InvalidDeviceState
from .fluctuation import fluctuate_metric
from .healing import apply_healing
from .problem_injector import maybe_inject
from .random_source import RandomValueGenerator
from .status_classifier import classify

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_state(kind: DeviceKind, state: DeviceState) -> None:
    """Verifica que el estado cumple el contrato de su tipo.

    Raises:
        InvalidDeviceState: si falta o sobra algo para el tipo declarado
    """
    kind = DeviceKind(kind)
    if state.kind != kind:
        raise InvalidDeviceState(
            state.id, f"declared kind '{state.kind}' does not match '{kind.value}'"
        )

    expected_type = METRICS_TYPE_BY_KIND[kind]
    if not isinstance(state.metrics, expected_type):
        raise InvalidDeviceState(
            state.id,
            f"metrics {type(state.metrics).__name__} are not {expected_type.__name__}",
        )

    for profile in continuous_profiles(kind):
        value = getattr(state.metrics, profile.name, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidDeviceState(state.id, f"metric '{profile.name}' is not a finite number: {value!r}")

    binary = binary_profile(kind)
    flag = getattr(state.metrics, binary.name, None)
    if flag not in (binary.good, binary.bad):
        raise InvalidDeviceState(state.id, f"field '{binary.name}' has invalid value {flag!r}")

    unknown = set(state.healing) - continuous_metric_names(kind)
    if unknown:
        raise InvalidDeviceState(state.id, f"healing set has unknown metrics {sorted(unknown)}")


class DeviceSimulator:
    """Motor de transición por dispositivo.

    Sin estado propio salvo la fuente aleatoria y el reloj, ambos
    inyectables para tests deterministas.
    """

    def __init__(
        self,
        rng: Optional[RandomValueGenerator] = None,
        clock: Optional[Clock] = None,
        problem_probability: Optional[float] = None,
    ):
        self._rng = rng or RandomValueGenerator()
        self._clock = clock or utc_now
        self._problem_probability = problem_probability

    def create_initial(self, kind: DeviceKind) -> DeviceState:
        """Estado inicial: métricas sanas, curación vacía, NORMAL."""
        kind = DeviceKind(kind)
        now = self._clock()

        values = {}
        for profile in continuous_profiles(kind):
            low, high = profile.initial_range
            values[profile.name] = self._rng.uniform(low, high, VALUE_PRECISION)
        binary = binary_profile(kind)
        values[binary.name] = binary.good

        return DeviceState(
            id=f"{kind.value}-{int(now.timestamp() * 1000)}",
            kind=kind,
            metrics=METRICS_TYPE_BY_KIND[kind](**values),
            status=Status.NORMAL,
            last_updated=now,
            healing=frozenset(),
        )

    def step(self, kind: DeviceKind, previous: DeviceState) -> DeviceState:
        """Un tick completo. No modifica `previous`."""
        kind = DeviceKind(kind)
        validate_state(kind, previous)

        values = {}
        for profile in continuous_profiles(kind):
            values[profile.name] = fluctuate_metric(
                profile, getattr(previous.metrics, profile.name), self._rng
            )

        binary = binary_profile(kind)
        flag: Enum = getattr(previous.metrics, binary.name)
        if self._rng.chance(binary.toggle_probability):
            flag = binary.toggled(flag)
        values[binary.name] = flag

        metrics = METRICS_TYPE_BY_KIND[kind](**values)
        metrics = maybe_inject(kind, metrics, self._rng, self._problem_probability)
        metrics, healing = apply_healing(kind, metrics, previous.healing)
        status = classify(kind, metrics, healing)

        return DeviceState(
            id=previous.id,
            kind=kind,
            metrics=metrics,
            status=status,
            last_updated=self._clock(),
            healing=healing,
        )


def create_initial(
    kind: DeviceKind,
    rng: Optional[RandomValueGenerator] = None,
    clock: Optional[Clock] = None,
) -> DeviceState:
    return DeviceSimulator(rng=rng, clock=clock).create_initial(kind)


def step(
    kind: DeviceKind,
    previous: DeviceState,
    rng: Optional[RandomValueGenerator] = None,
    clock: Optional[Clock] = None,
) -> DeviceState:
    return DeviceSimulator(rng=rng, clock=clock).step(kind, previous)
