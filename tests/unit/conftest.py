from __future__ import annotations

from typing import Any, Callable

import pytest

from src.domain.models import (
    Agency,
    CatalogIndex,
    GeoPoint,
    ManifestEntry,
    Stop,
    TripRouteEntry,
)


@pytest.fixture
def catalog_index() -> CatalogIndex:
    stops = {
        "S1": Stop(id="S1", name="Slussen", location=GeoPoint(lat=59.3195, lon=18.0722)),
        "S2": Stop(id="S2", name="Ropsten", location=GeoPoint(lat=59.3573, lon=18.1025)),
        "S3": Stop(id="S3", name="Vaxholm", location=GeoPoint(lat=59.4024, lon=18.3511)),
    }
    return CatalogIndex(
        stops_by_id=stops,
        manifest_by_route={
            "R1": ManifestEntry(
                route_id="R1",
                short_name="4",
                from_name="Slussen",
                to_name="Radiohuset",
                agency=Agency.SL,
            ),
            "R2": ManifestEntry(
                route_id="R2",
                short_name="Vaxholm",
                from_name="Strömkajen",
                to_name="Vaxholm",
                agency=Agency.WAAB,
            ),
            "R3": ManifestEntry(
                route_id="R3",
                short_name="Loop",
                from_name="Slussen",
                to_name="Slussen",
                agency=Agency.SL,
            ),
        },
        trip_index={
            "T1": TripRouteEntry(route_id="R1", headsign="Gullmarsplan"),
            "T2": TripRouteEntry(route_id="R1"),
            "T3": TripRouteEntry(route_id="R2"),
            "T4": TripRouteEntry(route_id="R3"),
        },
        direction_headsigns={"R1": {"0": "Radiohuset", "1": "Gullmarsplan"}},
    )


@pytest.fixture
def feed_bytes() -> Callable[..., bytes]:
    """Build serialized GTFS-RT FeedMessages from plain dicts."""

    from google.transit import gtfs_realtime_pb2

    def _build(
        *,
        vehicles: list[dict[str, Any]] | None = None,
        trip_updates: list[dict[str, Any]] | None = None,
    ) -> bytes:
        feed = gtfs_realtime_pb2.FeedMessage()
        feed.header.gtfs_realtime_version = "2.0"
        feed.header.timestamp = 1767859200

        for i, v in enumerate(vehicles or []):
            ent = feed.entity.add()
            ent.id = v.get("entity_id", f"e{i}")
            vp = ent.vehicle
            if v.get("trip_id") is not None:
                vp.trip.trip_id = v["trip_id"]
            if v.get("route_id"):
                vp.trip.route_id = v["route_id"]
            if v.get("direction_id") is not None:
                vp.trip.direction_id = v["direction_id"]
            if v.get("vehicle_id"):
                vp.vehicle.id = v["vehicle_id"]
            if v.get("label"):
                vp.vehicle.label = v["label"]
            if v.get("lat") is not None:
                vp.position.latitude = v["lat"]
                vp.position.longitude = v["lon"]
                if v.get("bearing") is not None:
                    vp.position.bearing = v["bearing"]
                if v.get("speed") is not None:
                    vp.position.speed = v["speed"]

        for i, tu in enumerate(trip_updates or []):
            ent = feed.entity.add()
            ent.id = f"tu{i}"
            upd = ent.trip_update
            upd.trip.trip_id = tu["trip_id"]
            if tu.get("route_id"):
                upd.trip.route_id = tu["route_id"]
            if tu.get("direction_id") is not None:
                upd.trip.direction_id = tu["direction_id"]
            for stu in tu.get("stop_time_updates", []):
                s = upd.stop_time_update.add()
                if stu.get("stop_id"):
                    s.stop_id = stu["stop_id"]
                if stu.get("arrival_delay") is not None:
                    s.arrival.delay = stu["arrival_delay"]
                if stu.get("departure_delay") is not None:
                    s.departure.delay = stu["departure_delay"]

        return feed.SerializeToString()

    return _build


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
