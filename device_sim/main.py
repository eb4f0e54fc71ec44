from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from common.config import Settings, get_settings

from .endpoints import devices_router, health_router, logs_router
from .monitoring.factory import create_session
from .monitoring.session import MonitoringSession

logger = logging.getLogger(__name__)


def _log_ticker_failure(task: "asyncio.Task") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.exception("[TICK] Monitoring loop crashed: %s", exc, exc_info=exc)


def create_app(
    session: Optional[MonitoringSession] = None,
    settings: Optional[Settings] = None,
    start_ticker: bool = True,
) -> FastAPI:
    """Crea la app HTTP de solo lectura sobre una sesión de monitorización.

    Args:
        session: Sesión existente (tests); si falta se crea desde settings
        settings: Configuración; por defecto get_settings()
        start_ticker: Si True, el lifespan arranca el loop de ticks
    """
    settings = settings or get_settings()
    session = session or create_session(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        stop_event = asyncio.Event()
        task = None
        if start_ticker:
            task = asyncio.create_task(session.run(settings.tick_seconds, stop_event))
            task.add_done_callback(_log_ticker_failure)
        try:
            yield
        finally:
            stop_event.set()
            if task is not None:
                # Un fallo del loop ya quedó logueado en _log_ticker_failure
                await asyncio.gather(task, return_exceptions=True)
            session.close()

    app = FastAPI(title="ICU Device Simulator", version="0.1.0", lifespan=lifespan)
    app.state.session = session

    app.include_router(health_router)
    app.include_router(devices_router)
    app.include_router(logs_router)
    return app
