"""Endpoint del feed de diagnóstico."""

from typing import List

from fastapi import APIRouter, Depends, Query

from ..monitoring.session import MonitoringSession
from ..schemas import LogEntryOut
from .deps import get_session

router = APIRouter(tags=["logs"])


@router.get("/logs", response_model=List[LogEntryOut])
def recent_logs(
    limit: int = Query(50, ge=1, le=500),
    session: MonitoringSession = Depends(get_session),
):
    return [LogEntryOut.from_entry(e) for e in session.log_feed.recent(limit)]
