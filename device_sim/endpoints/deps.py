"""Dependencias compartidas de los endpoints."""

from fastapi import HTTPException, Request

from ..domain.models import DeviceKind
from ..monitoring.session import MonitoringSession


def get_session(request: Request) -> MonitoringSession:
    return request.app.state.session


def parse_kind(kind: str) -> DeviceKind:
    try:
        return DeviceKind(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown device kind '{kind}'")
