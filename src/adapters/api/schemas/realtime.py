from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class VehicleSchema(BaseModel):
    id: str
    route_id: str
    trip_id: str
    agency: str
    operator: str
    kind: str
    vehicle_number: str | None = None
    lat: float
    lng: float
    bearing: float
    speed_kmh: float
    destination: str | None = None
    delay_s: int | None = None
    delay_min: int | None = None
    punctuality: str
    contractor: str | None = None


class VehiclesResponseSchema(BaseModel):
    fetched_at: datetime
    vehicles: list[VehicleSchema]


class StopPassageSchema(BaseModel):
    stop_id: str
    arrival_time: str
    arrived_at: datetime
    stopped: bool
    dwell_s: int | None = None
    dwell_duration: str | None = None


class PassagesResponseSchema(BaseModel):
    trip_id: str
    route_id: str
    passages: list[StopPassageSchema]
