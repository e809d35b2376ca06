"""JSON document shapes of the published catalog.

Keys stay short and camelCase because the documents are served as static
files to the map frontend.
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime
from typing import Any

from src.domain.models import (
    Agency,
    Catalog,
    CatalogIndex,
    GeoPoint,
    Line,
    ManifestEntry,
    Stop,
    TripRouteEntry,
    VehicleState,
)

STOPS_KEY = "stops.json"
MANIFEST_KEY = "manifest.json"
TRIP_INDEX_KEY = "trip-to-route.json"
DIRECTIONS_KEY = "route-directions.json"
LINES_DIR = "lines"
VEHICLES_KEY = "vehicles.json"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def line_key(route_id: str) -> str:
    safe = _UNSAFE.sub("_", route_id)
    if safe != route_id:
        # Keep distinct ids distinct once unsafe characters are replaced.
        digest = hashlib.sha1(route_id.encode("utf-8")).hexdigest()[:8]
        safe = f"{safe}-{digest}"
    return f"{LINES_DIR}/{safe}.json"


def stop_to_dict(stop: Stop) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": stop.id,
        "name": stop.name,
        "lat": stop.location.lat,
        "lng": stop.location.lon,
    }
    if stop.agency is not None:
        out["agency"] = stop.agency.value
    return out


def stop_from_dict(raw: dict[str, Any]) -> Stop:
    agency = raw.get("agency")
    return Stop(
        id=str(raw["id"]),
        name=str(raw.get("name") or raw["id"]),
        location=GeoPoint(lat=float(raw["lat"]), lon=float(raw["lng"])),
        agency=Agency(agency) if agency else None,
    )


def line_to_dict(line: Line) -> dict[str, Any]:
    return {
        "id": line.id,
        "shortName": line.short_name,
        "agency": line.agency.value,
        "path": [p.as_pair() for p in line.path],
        "stops": [stop_to_dict(s) for s in line.stops],
    }


def line_from_dict(raw: dict[str, Any]) -> Line:
    return Line(
        id=str(raw["id"]),
        short_name=str(raw["shortName"]),
        agency=Agency(raw["agency"]),
        path=tuple(GeoPoint(lat=float(lat), lon=float(lon)) for lat, lon in raw["path"]),
        stops=tuple(stop_from_dict(s) for s in raw["stops"]),
    )


def manifest_to_list(entries: dict[str, ManifestEntry]) -> list[dict[str, Any]]:
    return [
        {
            "id": e.route_id,
            "shortName": e.short_name,
            "from": e.from_name,
            "to": e.to_name,
            "agency": e.agency.value,
        }
        for e in entries.values()
    ]


def manifest_from_list(raw: list[dict[str, Any]]) -> dict[str, ManifestEntry]:
    out: dict[str, ManifestEntry] = {}
    for item in raw:
        entry = ManifestEntry(
            route_id=str(item["id"]),
            short_name=str(item["shortName"]),
            from_name=str(item["from"]),
            to_name=str(item["to"]),
            agency=Agency(item["agency"]),
        )
        out[entry.route_id] = entry
    return out


def trip_index_to_dict(index: dict[str, TripRouteEntry]) -> dict[str, dict[str, str]]:
    out: dict[str, dict[str, str]] = {}
    for trip_id, entry in index.items():
        item = {"r": entry.route_id}
        if entry.headsign:
            item["h"] = entry.headsign
        out[trip_id] = item
    return out


def trip_index_from_dict(raw: dict[str, dict[str, str]]) -> dict[str, TripRouteEntry]:
    return {
        trip_id: TripRouteEntry(route_id=item["r"], headsign=item.get("h") or None)
        for trip_id, item in raw.items()
    }


def catalog_documents(catalog: Catalog) -> dict[str, Any]:
    """All documents of a catalog keyed by their relative path."""

    docs: dict[str, Any] = {
        STOPS_KEY: [stop_to_dict(s) for s in catalog.index.stops_by_id.values()],
        MANIFEST_KEY: manifest_to_list(catalog.index.manifest_by_route),
        TRIP_INDEX_KEY: trip_index_to_dict(catalog.index.trip_index),
        DIRECTIONS_KEY: catalog.index.direction_headsigns,
    }
    for route_id, line in catalog.lines_by_id.items():
        docs[line_key(route_id)] = line_to_dict(line)
    return docs


def index_from_documents(
    *,
    stops: list[dict[str, Any]],
    manifest: list[dict[str, Any]],
    trip_index: dict[str, dict[str, str]],
    directions: dict[str, dict[str, str]] | None,
) -> CatalogIndex:
    stops_by_id = {s.id: s for s in (stop_from_dict(raw) for raw in stops)}
    return CatalogIndex(
        stops_by_id=stops_by_id,
        manifest_by_route=manifest_from_list(manifest),
        trip_index=trip_index_from_dict(trip_index),
        direction_headsigns={
            route_id: {str(k): str(v) for k, v in by_dir.items()}
            for route_id, by_dir in (directions or {}).items()
        },
    )


def vehicle_to_dict(v: VehicleState) -> dict[str, Any]:
    return {
        "id": v.id,
        "routeId": v.route_id,
        "tripId": v.trip_id,
        "agency": v.agency.value,
        "operator": v.operator,
        "kind": v.kind.value,
        "vehicleNumber": v.vehicle_number,
        "lat": v.lat,
        "lng": v.lon,
        "bearing": v.bearing,
        "speedKmh": v.speed_kmh,
        "destination": v.destination,
        "delaySec": v.delay_s,
        "delayMin": v.delay_min,
        "punctuality": v.punctuality.value,
        "contractor": v.contractor,
    }


def vehicles_document(
    vehicles: tuple[VehicleState, ...], *, cycle: int, fetched_at: datetime
) -> dict[str, Any]:
    return {
        "cycle": cycle,
        "fetchedAt": fetched_at.isoformat(),
        "vehicles": [vehicle_to_dict(v) for v in vehicles],
    }
