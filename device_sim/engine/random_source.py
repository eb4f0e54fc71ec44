"""Generador de valores aleatorios acotados con precisión fija."""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomValueGenerator:
    """Envuelve un random.Random inyectable.

    Uso:
        rng = RandomValueGenerator(seed=42)
        rng.uniform(38.0, 39.5)  # -> 38.7
    """

    def __init__(self, seed: Optional[int] = None, source: Optional[random.Random] = None):
        self._random = source if source is not None else random.Random(seed)

    def uniform(self, min_value: float, max_value: float, precision: int = 1) -> float:
        """Valor uniforme en [min_value, max_value] redondeado a `precision` decimales."""
        value = self._random.random() * (max_value - min_value) + min_value
        return round(value, precision)

    def delta(self, max_step: float) -> float:
        """Delta uniforme en [-max_step, +max_step], sin redondear."""
        return self._random.random() * max_step * 2 - max_step

    def chance(self, probability: float) -> bool:
        return self._random.random() < probability

    def choice(self, items: Sequence[T]) -> T:
        return items[self._random.randrange(len(items))]
