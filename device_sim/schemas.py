from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Union

from pydantic import BaseModel, Field

from .domain.models import DeviceKind, DeviceState, LogEntry, Status, metrics_as_dict
from .domain.profiles import BinaryProfile, Direction, MetricProfile


class DeviceStateOut(BaseModel):
    id: str
    kind: DeviceKind
    status: Status
    metrics: Dict[str, Union[float, str]]
    healing: List[str] = Field(default_factory=list)
    last_updated: datetime

    @classmethod
    def from_state(cls, state: DeviceState) -> "DeviceStateOut":
        return cls(
            id=state.id,
            kind=state.kind,
            status=state.status,
            metrics=metrics_as_dict(state.metrics),
            healing=sorted(state.healing),
            last_updated=state.last_updated,
        )


class LogEntryOut(BaseModel):
    id: str
    device: str
    message: str
    status: Status
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogEntryOut":
        return cls(
            id=entry.id,
            device=entry.device,
            message=entry.message,
            status=entry.status,
            timestamp=entry.timestamp,
        )


class MetricThresholdsOut(BaseModel):
    name: str
    label: str
    unit: str
    min_value: float
    max_value: float
    warning: float
    critical: float
    direction: Direction
    healing_target: float
    healing_rate: float

    @classmethod
    def from_profile(cls, p: MetricProfile) -> "MetricThresholdsOut":
        return cls(
            name=p.name,
            label=p.label,
            unit=p.unit,
            min_value=p.min_value,
            max_value=p.max_value,
            warning=p.warning,
            critical=p.critical,
            direction=p.direction,
            healing_target=p.healing_target,
            healing_rate=p.healing_rate,
        )


class BinaryFieldOut(BaseModel):
    name: str
    label: str
    good: str
    bad: str

    @classmethod
    def from_profile(cls, p: BinaryProfile) -> "BinaryFieldOut":
        return cls(name=p.name, label=p.label, good=p.good.value, bad=p.bad.value)


class DeviceThresholdsOut(BaseModel):
    kind: DeviceKind
    metrics: List[MetricThresholdsOut]
    binary: BinaryFieldOut
