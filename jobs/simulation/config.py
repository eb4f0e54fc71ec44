"""Simulation runner configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunnerConfig:
    """Configuración del runner de simulación."""
    interval_seconds: float
    ticks: Optional[int]
    seed: Optional[int]
    notify: bool
    once: bool
