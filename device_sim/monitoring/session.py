"""Sesión de monitorización: driver de ticks para ambos dispositivos.

Por tick y por dispositivo:
- step() del motor
- LogEntry si el estado cambió
- notificación al técnico si el cambio es hacia ALERT (edge-triggered)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from ..alerts.dispatcher import NotificationDispatcher
from ..domain.models import DeviceKind, DeviceState, LogEntry, Status
from ..engine.simulation_step import DeviceSimulator
from .log_feed import LogFeed, make_log_entry

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 5.0


class MonitoringSession:
    """Mantiene el último DeviceState por dispositivo."""

    def __init__(
        self,
        simulator: Optional[DeviceSimulator] = None,
        log_feed: Optional[LogFeed] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        kinds: Iterable[DeviceKind] = tuple(DeviceKind),
    ):
        self._simulator = simulator or DeviceSimulator()
        self._log_feed = log_feed or LogFeed()
        self._dispatcher = dispatcher
        self._states: Dict[DeviceKind, DeviceState] = {
            DeviceKind(kind): self._simulator.create_initial(kind) for kind in kinds
        }
        self._ticks = 0

    @property
    def log_feed(self) -> LogFeed:
        return self._log_feed

    @property
    def ticks(self) -> int:
        return self._ticks

    def state(self, kind: DeviceKind) -> DeviceState:
        return self._states[DeviceKind(kind)]

    def snapshot(self) -> Dict[DeviceKind, DeviceState]:
        return dict(self._states)

    def close(self) -> None:
        """Libera el dispatcher de notificaciones (sin esperar envíos en curso)."""
        if self._dispatcher is not None:
            self._dispatcher.shutdown(wait=False)

    def tick(self) -> List[LogEntry]:
        """Avanza todos los dispositivos un tick.

        Returns:
            LogEntries emitidas en este tick
        """
        emitted: List[LogEntry] = []
        for kind, previous in list(self._states.items()):
            current = self._simulator.step(kind, previous)
            self._states[kind] = current

            if current.status == previous.status:
                continue

            logger.info(
                "[TICK] %s %s -> %s healing=%s",
                kind.value, previous.status.value, current.status.value, sorted(current.healing),
            )
            entry = make_log_entry(kind, current.status, current.last_updated)
            self._log_feed.publish(entry)
            emitted.append(entry)

            if current.status == Status.ALERT and self._dispatcher is not None:
                self._dispatcher.dispatch(kind, current)

        self._ticks += 1
        return emitted

    async def run(
        self,
        interval_seconds: float = DEFAULT_TICK_SECONDS,
        stop_event: Optional[asyncio.Event] = None,
        max_ticks: Optional[int] = None,
    ) -> None:
        """Loop de ticks. Solo suspende esperando el siguiente intervalo."""
        stop_event = stop_event or asyncio.Event()
        logger.info("[TICK] Monitoring loop started interval=%.1fs", interval_seconds)

        ran = 0
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
                break
            except asyncio.TimeoutError:
                pass

            self.tick()
            ran += 1
            if max_ticks is not None and ran >= max_ticks:
                break

        logger.info("[TICK] Monitoring loop stopped after %d ticks", ran)
