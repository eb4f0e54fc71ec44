"""Módulo de endpoints HTTP (solo lectura)."""

from .devices import router as devices_router
from .health import router as health_router
from .logs import router as logs_router

__all__ = [
    "devices_router",
    "health_router",
    "logs_router",
]
