from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_passage_service, get_reconciler_service
from src.adapters.api.schemas.realtime import (
    PassagesResponseSchema,
    StopPassageSchema,
    VehicleSchema,
    VehiclesResponseSchema,
)
from src.app.services.passage_service import PassageService
from src.app.services.realtime_reconciler_service import RealtimeReconcilerService
from src.domain.models import Agency, VehicleState

router = APIRouter(prefix="/realtime", tags=["realtime"])


def _vehicle_to_schema(v: VehicleState) -> VehicleSchema:
    return VehicleSchema(
        id=v.id,
        route_id=v.route_id,
        trip_id=v.trip_id,
        agency=v.agency.value,
        operator=v.operator,
        kind=v.kind.value,
        vehicle_number=v.vehicle_number,
        lat=v.lat,
        lng=v.lon,
        bearing=v.bearing,
        speed_kmh=v.speed_kmh,
        destination=v.destination,
        delay_s=v.delay_s,
        delay_min=v.delay_min,
        punctuality=v.punctuality.value,
        contractor=v.contractor,
    )


@router.get("/vehicles", response_model=VehiclesResponseSchema)
async def list_vehicles(
    agency: Agency | None = Query(default=None),
    service: RealtimeReconcilerService = Depends(get_reconciler_service),
) -> VehiclesResponseSchema:
    vehicles = await service.list_vehicles(agency=agency)
    return VehiclesResponseSchema(
        fetched_at=datetime.now(timezone.utc),
        vehicles=[_vehicle_to_schema(v) for v in vehicles],
    )


@router.get("/vehicles/find", response_model=VehicleSchema)
async def find_vehicle(
    number: str = Query(..., min_length=1),
    service: RealtimeReconcilerService = Depends(get_reconciler_service),
) -> VehicleSchema:
    vehicle = await service.find_vehicle(number)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return _vehicle_to_schema(vehicle)


@router.get("/trips/{trip_id}/passages", response_model=PassagesResponseSchema)
async def trip_passages(
    trip_id: str,
    route_id: str = Query(..., min_length=1),
    service: PassageService = Depends(get_passage_service),
) -> PassagesResponseSchema:
    passages = await service.passages(trip_id=trip_id, route_id=route_id)
    return PassagesResponseSchema(
        trip_id=trip_id,
        route_id=route_id,
        passages=[
            StopPassageSchema(
                stop_id=stop_id,
                arrival_time=p.arrival_time,
                arrived_at=p.arrived_at,
                stopped=p.stopped,
                dwell_s=p.dwell_s,
                dwell_duration=p.dwell_duration,
            )
            for stop_id, p in passages.items()
        ],
    )
