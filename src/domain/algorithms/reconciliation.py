from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from src.domain.algorithms.destination import DestinationContext, resolve_destination
from src.domain.models import (
    Agency,
    CatalogIndex,
    RealtimeVehicleFix,
    TripUpdate,
    VehicleState,
)
from src.domain.models.agency import CONTRACTOR_CODES, OPERATOR_LABELS, VEHICLE_KINDS

MPS_TO_KMH = 3.6

_CONTRACTOR_RE = re.compile(r"([0-9]{3})([0-9]{4})$")


@dataclass(frozen=True, slots=True)
class TripUpdateInfo:
    delay_s: int | None = None
    last_stop_id: str | None = None
    direction_id: int | None = None
    route_id: str | None = None


def build_trip_update_index(
    trip_updates: Iterable[TripUpdate],
) -> dict[str, TripUpdateInfo]:
    """Per-trip delay, destination stop and descriptor fallbacks.

    Delay comes from the first stop-time update (arrival, else departure);
    the last update's stop id serves as a destination fallback.
    """

    out: dict[str, TripUpdateInfo] = {}
    for tu in trip_updates:
        if not tu.trip_id or not tu.stop_time_updates:
            continue

        first = tu.stop_time_updates[0]
        last = tu.stop_time_updates[-1]
        delay = (
            first.arrival_delay_s
            if first.arrival_delay_s is not None
            else first.departure_delay_s
        )
        out[tu.trip_id] = TripUpdateInfo(
            delay_s=delay,
            last_stop_id=last.stop_id or None,
            direction_id=tu.direction_id,
            route_id=tu.route_id,
        )
    return out


def contractor_for_vehicle(vehicle_id: str | None) -> str | None:
    if not vehicle_id:
        return None
    match = _CONTRACTOR_RE.search(vehicle_id)
    if match is None:
        return None
    code = match.group(1)
    return CONTRACTOR_CODES.get(code, f"Contractor {code}")


def vehicle_number(fix: RealtimeVehicleFix) -> str | None:
    if fix.label:
        return fix.label
    if fix.vehicle_id:
        return fix.vehicle_id[-4:]
    return None


def reconcile_vehicles(
    fixes: Iterable[RealtimeVehicleFix],
    trip_updates: Iterable[TripUpdate],
    catalog: CatalogIndex,
    *,
    agency: Agency | None = None,
    route_contractors: Mapping[str, str] | None = None,
) -> tuple[VehicleState, ...]:
    """Join vehicle positions with trip updates and the static catalog.

    Pure: builds a fresh per-call index and never mutates its inputs.
    Vehicles whose trip is unknown to the catalog are dropped. The contractor
    comes from the vehicle id when it encodes one, else from
    ``route_contractors``.
    """

    info_by_trip = build_trip_update_index(trip_updates)

    out: list[VehicleState] = []
    for fix in fixes:
        trip_entry = catalog.trip_index.get(fix.trip_id)
        if trip_entry is None:
            continue

        info = info_by_trip.get(fix.trip_id)

        route_id = trip_entry.route_id or (info.route_id if info else None)
        if not route_id:
            continue
        manifest_entry = catalog.manifest_by_route.get(route_id)
        if manifest_entry is None:
            continue
        if agency is not None and manifest_entry.agency != agency:
            continue

        direction_id = fix.direction_id
        if direction_id is None and info is not None:
            direction_id = info.direction_id

        destination = resolve_destination(
            DestinationContext(
                route_id=route_id,
                trip_entry=trip_entry,
                manifest_entry=manifest_entry,
                catalog=catalog,
                direction_id=direction_id,
                last_stop_id=info.last_stop_id if info else None,
            )
        )

        out.append(
            VehicleState(
                id=fix.vehicle_id or fix.entity_id,
                route_id=route_id,
                trip_id=fix.trip_id,
                agency=manifest_entry.agency,
                operator=OPERATOR_LABELS[manifest_entry.agency],
                kind=VEHICLE_KINDS[manifest_entry.agency],
                vehicle_number=vehicle_number(fix),
                lat=fix.lat,
                lon=fix.lon,
                bearing=float(fix.bearing or 0.0),
                speed_kmh=float(fix.speed_mps or 0.0) * MPS_TO_KMH,
                destination=destination,
                delay_s=info.delay_s if info else None,
                contractor=(
                    contractor_for_vehicle(fix.vehicle_id)
                    or (route_contractors or {}).get(route_id)
                ),
            )
        )

    return tuple(out)
