"""Feed de diagnóstico acotado (más reciente primero)."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, List, Optional

from ..alerts.messages import status_message
from ..domain.models import DeviceKind, LogEntry, Status

logger = logging.getLogger(__name__)

DEFAULT_FEED_SIZE = 50
SYSTEM_DEVICE = "system"

LogSink = Callable[[LogEntry], None]


def make_log_entry(kind: DeviceKind, status: Status, timestamp: Optional[datetime] = None) -> LogEntry:
    """Entrada para un cambio de estado, con el mensaje de la tabla por tipo."""
    return LogEntry(
        id=uuid.uuid4().hex,
        device=DeviceKind(kind).value,
        message=status_message(kind, status),
        status=Status(status),
        timestamp=timestamp or datetime.now(timezone.utc),
    )


class LogFeed:
    """Feed en memoria con suscriptores.

    Un suscriptor que falla no afecta al feed ni a los demás.
    """

    def __init__(self, max_size: int = DEFAULT_FEED_SIZE):
        self._entries: Deque[LogEntry] = deque(maxlen=max_size)
        self._sinks: List[LogSink] = []
        self._lock = threading.Lock()
        self._entries.appendleft(
            LogEntry(
                id=uuid.uuid4().hex,
                device=SYSTEM_DEVICE,
                message="Monitoring system initialized",
                status=Status.NORMAL,
                timestamp=datetime.now(timezone.utc),
            )
        )

    def subscribe(self, sink: LogSink) -> None:
        self._sinks.append(sink)

    def publish(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.appendleft(entry)
        for sink in list(self._sinks):
            try:
                sink(entry)
            except Exception:
                logger.exception("[LOG_FEED] Sink failed entry=%s", entry.id)

    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            entries = list(self._entries)
        return entries if limit is None else entries[:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
