"""Runner headless: sesión de monitorización sin la API HTTP."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from common.config import Settings
from device_sim.domain.models import LogEntry
from device_sim.monitoring.factory import create_session
from device_sim.monitoring.session import MonitoringSession

from .config import RunnerConfig

logger = logging.getLogger(__name__)


def log_entry_sink(entry: LogEntry) -> None:
    logger.info("[%s] %s: %s", entry.status.value.upper(), entry.device, entry.message)


def build_session(cfg: RunnerConfig, settings: Settings) -> MonitoringSession:
    settings = replace(
        settings,
        tick_seconds=cfg.interval_seconds,
        random_seed=cfg.seed if cfg.seed is not None else settings.random_seed,
        notifications_enabled=cfg.notify or settings.notifications_enabled,
    )
    session = create_session(settings)
    session.log_feed.subscribe(log_entry_sink)
    return session


def run(cfg: RunnerConfig, session: MonitoringSession) -> int:
    """Ejecuta la sesión según la config. Retorna el nº de ticks ejecutados."""
    try:
        if cfg.once:
            session.tick()
        else:
            asyncio.run(session.run(cfg.interval_seconds, max_ticks=cfg.ticks))
    finally:
        session.close()

    for kind, state in session.snapshot().items():
        logger.info(
            "Final %s status=%s healing=%s", kind.value, state.status.value, sorted(state.healing)
        )
    return session.ticks
