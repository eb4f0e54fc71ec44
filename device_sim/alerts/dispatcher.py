"""Despacho fire-and-forget de notificaciones.

El tick encola y retorna de inmediato; el envío ocurre en un pool de
threads. Un fallo del notificador se loguea y nunca llega al tick.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Protocol

from ..domain.models import DeviceKind, DeviceState

logger = logging.getLogger(__name__)

DEFAULT_NUM_WORKERS = 2


class Notifier(Protocol):
    def send(self, kind: DeviceKind, state: DeviceState) -> object: ...


class NotificationDispatcher:
    """ThreadPool wrapper para un Notifier."""

    def __init__(self, notifier: Notifier, num_workers: int = DEFAULT_NUM_WORKERS):
        self._notifier = notifier
        self._executor = ThreadPoolExecutor(
            max_workers=num_workers, thread_name_prefix="notify"
        )

        # Metrics
        self._dispatched = 0
        self._failed = 0
        self._lock = threading.Lock()

    def dispatch(self, kind: DeviceKind, state: DeviceState) -> Optional[Future]:
        """Encola el envío. Nunca lanza excepción al llamador."""
        try:
            future = self._executor.submit(self._notifier.send, kind, state)
        except RuntimeError as e:
            # Executor ya cerrado
            logger.warning("[NOTIFY] Dispatch rejected device=%s: %s", state.id, e)
            return None

        with self._lock:
            self._dispatched += 1
        future.add_done_callback(lambda f: self._on_done(f, state))
        return future

    def _on_done(self, future: Future, state: DeviceState) -> None:
        exc = future.exception()
        if exc is None:
            return
        with self._lock:
            self._failed += 1
        logger.error("[NOTIFY] Notifier failed device=%s: %s", state.id, exc)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        logger.info("[NOTIFY] Dispatcher stopped. %s", self.metrics)

    @property
    def metrics(self) -> dict:
        with self._lock:
            return {"dispatched": self._dispatched, "failed": self._failed}
