"""Factory para crear la sesión de monitorización.

Centraliza la configuración: semilla, tamaño del feed y notificaciones.
"""

from __future__ import annotations

import logging
from typing import Optional

from common.config import Settings, get_settings

from ..alerts.dispatcher import NotificationDispatcher
from ..alerts.notification_service import NotifierConfig, TechnicianNotifier
from ..engine.random_source import RandomValueGenerator
from ..engine.simulation_step import DeviceSimulator
from .log_feed import LogFeed
from .session import MonitoringSession

logger = logging.getLogger(__name__)


def create_dispatcher(settings: Settings) -> Optional[NotificationDispatcher]:
    """Dispatcher de notificaciones, o None si están deshabilitadas."""
    if not settings.notifications_enabled:
        logger.info("[SESSION_FACTORY] Notifications disabled")
        return None
    notifier = TechnicianNotifier(NotifierConfig.from_settings(settings))
    return NotificationDispatcher(notifier)


def create_session(settings: Optional[Settings] = None) -> MonitoringSession:
    settings = settings or get_settings()

    simulator = DeviceSimulator(rng=RandomValueGenerator(seed=settings.random_seed))
    session = MonitoringSession(
        simulator=simulator,
        log_feed=LogFeed(max_size=settings.log_feed_size),
        dispatcher=create_dispatcher(settings),
    )
    logger.info(
        "[SESSION_FACTORY] Session created seed=%s feed_size=%d",
        settings.random_seed, settings.log_feed_size,
    )
    return session
