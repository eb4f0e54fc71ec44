"""Fixtures compartidas."""

from __future__ import annotations

import pytest

from common.config import Settings
from device_sim.engine.random_source import RandomValueGenerator

from tests.helpers import fixed_clock, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def seeded_rng() -> RandomValueGenerator:
    return RandomValueGenerator(seed=42)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Evita que un .env local influya en los tests."""
    monkeypatch.setenv("SIM_ENV_FILE", str(tmp_path / "missing.env"))
    for name in (
        "SIM_TICK_SECONDS",
        "SIM_LOG_FEED_SIZE",
        "SIM_RANDOM_SEED",
        "SIM_NOTIFICATIONS_ENABLED",
        "NOTIFY_TIMEOUT_SECONDS",
        "EMAILJS_SERVICE_ID",
        "TECHNICIAN_EMAIL",
        "TWILIO_ACCOUNT_SID",
        "TECHNICIAN_WHATSAPP",
    ):
        monkeypatch.delenv(name, raising=False)
