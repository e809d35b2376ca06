from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .agency import Agency, VehicleKind

ON_TIME_THRESHOLD_S = 45


class Punctuality(str, Enum):
    UNKNOWN = "unknown"
    ON_TIME = "on_time"
    LATE = "late"
    EARLY = "early"


@dataclass(frozen=True, slots=True)
class RealtimeVehicleFix:
    entity_id: str
    trip_id: str
    lat: float
    lon: float
    vehicle_id: str | None = None
    label: str | None = None
    route_id: str | None = None
    direction_id: int | None = None
    bearing: float | None = None
    speed_mps: float | None = None


@dataclass(frozen=True, slots=True)
class StopTimeUpdate:
    stop_id: str | None = None
    arrival_delay_s: int | None = None
    departure_delay_s: int | None = None


@dataclass(frozen=True, slots=True)
class TripUpdate:
    trip_id: str
    stop_time_updates: tuple[StopTimeUpdate, ...] = ()
    route_id: str | None = None
    direction_id: int | None = None


@dataclass(frozen=True, slots=True)
class VehicleState:
    id: str
    route_id: str
    trip_id: str
    agency: Agency
    operator: str
    kind: VehicleKind
    vehicle_number: str | None
    lat: float
    lon: float
    bearing: float
    speed_kmh: float
    destination: str | None = None
    # None means no realtime delay information, not "on time".
    delay_s: int | None = None
    contractor: str | None = None

    @property
    def punctuality(self) -> Punctuality:
        if self.delay_s is None:
            return Punctuality.UNKNOWN
        if abs(self.delay_s) < ON_TIME_THRESHOLD_S:
            return Punctuality.ON_TIME
        return Punctuality.LATE if self.delay_s > 0 else Punctuality.EARLY

    @property
    def delay_min(self) -> int | None:
        if self.delay_s is None:
            return None
        return round(self.delay_s / 60)
