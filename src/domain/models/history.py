from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    lat: float
    lon: float
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class StopPassage:
    arrival_time: str
    arrived_at: datetime
    stopped: bool
    dwell_s: int | None = None
    dwell_duration: str | None = None
