"""Endpoints de solo lectura sobre el estado de los dispositivos."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..domain.profiles import binary_profile, continuous_profiles
from ..monitoring.session import MonitoringSession
from ..schemas import (
    BinaryFieldOut,
    DeviceStateOut,
    DeviceThresholdsOut,
    MetricThresholdsOut,
)
from .deps import get_session, parse_kind

router = APIRouter(tags=["devices"])


@router.get("/devices", response_model=List[DeviceStateOut])
def list_devices(session: MonitoringSession = Depends(get_session)):
    return [DeviceStateOut.from_state(s) for s in session.snapshot().values()]


@router.get("/devices/{kind}", response_model=DeviceStateOut)
def get_device(kind: str, session: MonitoringSession = Depends(get_session)):
    device_kind = parse_kind(kind)
    snapshot = session.snapshot()
    if device_kind not in snapshot:
        raise HTTPException(status_code=404, detail=f"Device '{kind}' not simulated")
    return DeviceStateOut.from_state(snapshot[device_kind])


@router.get("/devices/{kind}/thresholds", response_model=DeviceThresholdsOut)
def get_thresholds(kind: str):
    """Umbrales canónicos, para que la UI no mantenga su propia copia."""
    device_kind = parse_kind(kind)
    return DeviceThresholdsOut(
        kind=device_kind,
        metrics=[MetricThresholdsOut.from_profile(p) for p in continuous_profiles(device_kind)],
        binary=BinaryFieldOut.from_profile(binary_profile(device_kind)),
    )
