from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from src.domain.models import CatalogIndex, ManifestEntry, TripRouteEntry


@dataclass(frozen=True, slots=True)
class DestinationContext:
    route_id: str
    trip_entry: TripRouteEntry
    manifest_entry: ManifestEntry
    catalog: CatalogIndex
    direction_id: int | None = None
    last_stop_id: str | None = None


DestinationResolver = Callable[[DestinationContext], str | None]


def static_headsign(ctx: DestinationContext) -> str | None:
    return ctx.trip_entry.headsign or None


def direction_headsign(ctx: DestinationContext) -> str | None:
    if ctx.direction_id is None:
        return None
    by_direction = ctx.catalog.direction_headsigns.get(ctx.route_id) or {}
    return by_direction.get(str(ctx.direction_id)) or None


def last_stop_name(ctx: DestinationContext) -> str | None:
    if not ctx.last_stop_id:
        return None
    stop = ctx.catalog.stops_by_id.get(ctx.last_stop_id)
    return stop.name if stop is not None and stop.name else None


def terminal_stop_name(ctx: DestinationContext) -> str | None:
    entry = ctx.manifest_entry
    # A loop line's terminal says nothing about where the vehicle is heading.
    if entry.to_name and entry.to_name != entry.from_name:
        return entry.to_name
    return None


DESTINATION_RESOLVERS: tuple[DestinationResolver, ...] = (
    static_headsign,
    direction_headsign,
    last_stop_name,
    terminal_stop_name,
)


def resolve_destination(
    ctx: DestinationContext,
    resolvers: tuple[DestinationResolver, ...] = DESTINATION_RESOLVERS,
) -> str | None:
    """Return the first non-empty destination label, in resolver order."""

    for resolver in resolvers:
        label = resolver(ctx)
        if label:
            return label
    return None
