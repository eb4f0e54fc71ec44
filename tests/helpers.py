"""Helpers de tests: fuente aleatoria guionizada, reloj fijo y settings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Sequence

from common.config import Settings
from device_sim.engine.random_source import RandomValueGenerator

FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class ScriptedRandom(RandomValueGenerator):
    """Fuente aleatoria guionizada para tests del paso completo.

    - delta() siempre 0 (sin fluctuación)
    - chance() consume respuestas en orden; False cuando se agotan
    - uniform() devuelve el mínimo del rango
    - choice() devuelve el elemento `choice_index`
    """

    def __init__(self, chances: Sequence[bool] = (), choice_index: int = 0):
        super().__init__(seed=0)
        self._chances: List[bool] = list(chances)
        self._choice_index = choice_index

    def delta(self, max_step: float) -> float:
        return 0.0

    def chance(self, probability: float) -> bool:
        return self._chances.pop(0) if self._chances else False

    def uniform(self, min_value: float, max_value: float, precision: int = 1) -> float:
        return round(min_value, precision)

    def choice(self, items):
        return items[self._choice_index]


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_settings(**overrides) -> Settings:
    values = dict(
        tick_seconds=5.0,
        log_feed_size=50,
        random_seed=1234,
        notifications_enabled=False,
        notify_timeout_seconds=5.0,
        emailjs_service_id="",
        emailjs_template_id="",
        emailjs_public_key="",
        technician_email="",
        twilio_account_sid="",
        twilio_auth_token="",
        twilio_whatsapp_from="",
        technician_whatsapp="",
    )
    values.update(overrides)
    return Settings(**values)


