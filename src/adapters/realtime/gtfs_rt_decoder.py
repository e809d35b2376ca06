from __future__ import annotations

import threading
from typing import Any

from src.domain.models import RealtimeVehicleFix, StopTimeUpdate, TripUpdate


class LazyFeedSchema:
    """Process-wide, write-once handle to the GTFS-RT ``FeedMessage`` type.

    The protobuf module is imported on first use only; concurrent first
    callers all get the same type object.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._message_type: Any | None = None

    @property
    def initialized(self) -> bool:
        return self._message_type is not None

    def message_type(self) -> Any:
        message_type = self._message_type
        if message_type is None:
            with self._lock:
                if self._message_type is None:
                    from google.transit import gtfs_realtime_pb2

                    self._message_type = gtfs_realtime_pb2.FeedMessage
                message_type = self._message_type
        return message_type

    def parse(self, content: bytes) -> Any:
        feed = self.message_type()()
        feed.ParseFromString(content)
        return feed


FEED_SCHEMA = LazyFeedSchema()


def decode_vehicle_positions(
    content: bytes, schema: LazyFeedSchema = FEED_SCHEMA
) -> tuple[RealtimeVehicleFix, ...]:
    feed = schema.parse(content)

    out: list[RealtimeVehicleFix] = []
    for ent in feed.entity:
        if not ent.HasField("vehicle"):
            continue

        v = ent.vehicle
        if not v.HasField("position") or not v.HasField("trip"):
            continue
        trip_id = v.trip.trip_id
        if not trip_id:
            continue

        pos = v.position
        vehicle_id = None
        label = None
        if v.HasField("vehicle"):
            vehicle_id = v.vehicle.id or None
            label = v.vehicle.label or None

        out.append(
            RealtimeVehicleFix(
                entity_id=ent.id,
                trip_id=trip_id,
                lat=float(pos.latitude),
                lon=float(pos.longitude),
                vehicle_id=vehicle_id,
                label=label,
                route_id=v.trip.route_id or None,
                direction_id=(
                    int(v.trip.direction_id)
                    if v.trip.HasField("direction_id")
                    else None
                ),
                bearing=float(pos.bearing) if pos.HasField("bearing") else None,
                speed_mps=float(pos.speed) if pos.HasField("speed") else None,
            )
        )

    return tuple(out)


def _delay(event: Any, parent: Any, name: str) -> int | None:
    if not parent.HasField(name) or not event.HasField("delay"):
        return None
    return int(event.delay)


def decode_trip_updates(
    content: bytes, schema: LazyFeedSchema = FEED_SCHEMA
) -> tuple[TripUpdate, ...]:
    feed = schema.parse(content)

    out: list[TripUpdate] = []
    for ent in feed.entity:
        if not ent.HasField("trip_update"):
            continue

        tu = ent.trip_update
        trip = tu.trip
        if not trip.trip_id:
            continue

        out.append(
            TripUpdate(
                trip_id=trip.trip_id,
                route_id=trip.route_id or None,
                direction_id=(
                    int(trip.direction_id) if trip.HasField("direction_id") else None
                ),
                stop_time_updates=tuple(
                    StopTimeUpdate(
                        stop_id=stu.stop_id or None,
                        arrival_delay_s=_delay(stu.arrival, stu, "arrival"),
                        departure_delay_s=_delay(stu.departure, stu, "departure"),
                    )
                    for stu in tu.stop_time_update
                ),
            )
        )

    return tuple(out)
