from __future__ import annotations

from dataclasses import dataclass, field

from .agency import Agency
from .geo import GeoPoint
from .stop import Stop


@dataclass(frozen=True, slots=True)
class GtfsRoute:
    route_id: str
    agency: Agency
    short_name: str | None = None
    long_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.short_name or self.long_name or self.route_id


@dataclass(frozen=True, slots=True)
class Line:
    """Compacted route document built from the route's representative trip."""

    id: str
    short_name: str
    agency: Agency
    path: tuple[GeoPoint, ...]
    stops: tuple[Stop, ...]


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    route_id: str
    short_name: str
    from_name: str
    to_name: str
    agency: Agency


@dataclass(frozen=True, slots=True)
class TripRouteEntry:
    route_id: str
    headsign: str | None = None


@dataclass(frozen=True, slots=True)
class CatalogIndex:
    """Lookup tables the realtime join needs; no per-line geometry."""

    stops_by_id: dict[str, Stop]
    manifest_by_route: dict[str, ManifestEntry]
    trip_index: dict[str, TripRouteEntry]
    # route_id -> direction_id -> headsign
    direction_headsigns: dict[str, dict[str, str]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CompactionReport:
    routes_retained: int = 0
    trips_indexed: int = 0
    lines_written: int = 0
    # route_id -> reason
    excluded_routes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Catalog:
    lines_by_id: dict[str, Line]
    index: CatalogIndex
    report: CompactionReport = field(default_factory=CompactionReport)
