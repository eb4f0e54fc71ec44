"""Health endpoint."""

from fastapi import APIRouter, Depends

from .deps import get_session
from ..monitoring.session import MonitoringSession

router = APIRouter(tags=["health"])


@router.get("/health")
def health(session: MonitoringSession = Depends(get_session)):
    """Liveness probe. Incluye el número de ticks ejecutados."""
    return {"status": "ok", "ticks": session.ticks}
