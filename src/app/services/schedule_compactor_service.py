from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, replace
from typing import Mapping

from src.app.ports.output import ICatalogRepository, IGtfsArchive
from src.domain.exceptions import MissingTableError
from src.domain.models import (
    Agency,
    Catalog,
    CatalogIndex,
    CompactionReport,
    GeoPoint,
    GtfsRoute,
    Line,
    ManifestEntry,
    Stop,
    TripRouteEntry,
)
from src.domain.models.agency import classify_agency
from src.domain.models.geo import round_coord

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "routes.txt",
    "trips.txt",
    "stop_times.txt",
    "stops.txt",
    "shapes.txt",
)


def _cell(row: Mapping[str, str], key: str) -> str:
    return (row.get(key) or "").strip()


def _int_cell(row: Mapping[str, str], key: str) -> int | None:
    try:
        return int(_cell(row, key))
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class SelectionIndex:
    """Result of the index pass; sized to the selected subset where possible."""

    routes_by_id: dict[str, GtfsRoute]
    trip_index: dict[str, TripRouteEntry]
    representative_by_route: dict[str, str]
    shape_by_selected_trip: dict[str, str]
    direction_headsigns: dict[str, dict[str, str]]

    @property
    def selected_trip_ids(self) -> frozenset[str]:
        return frozenset(self.representative_by_route.values())

    @property
    def selected_shape_ids(self) -> frozenset[str]:
        return frozenset(self.shape_by_selected_trip.values())


@dataclass(frozen=True, slots=True)
class CollectedRows:
    stop_ids_by_trip: dict[str, tuple[str, ...]]
    stops_by_id: dict[str, Stop]
    shapes_by_id: dict[str, tuple[GeoPoint, ...]]


@dataclass(slots=True)
class ScheduleCompactorService:
    """Streams a static GTFS archive into a compact route/stop catalog.

    Two stages keep memory bounded by the selected subset rather than the
    archive: an index pass picks one representative trip per route, then a
    collection pass re-streams the large tables keeping only rows that
    belong to those trips.
    """

    archive: IGtfsArchive
    catalog_repository: ICatalogRepository | None = None
    agency_table: Mapping[str, Agency] | None = None

    def run(self) -> Catalog:
        catalog = self.compact()
        if self.catalog_repository is not None:
            self.catalog_repository.save_catalog(catalog)
            logger.info("Catalog published (%d lines)", len(catalog.lines_by_id))
        return catalog

    def compact(self) -> Catalog:
        self._require_tables()
        index = self.index_pass()
        rows = self.collection_pass(index)
        return self._assemble(index, rows)

    def _require_tables(self) -> None:
        for table in REQUIRED_TABLES:
            if not self.archive.has_table(table):
                raise MissingTableError(table)

    def index_pass(self) -> SelectionIndex:
        routes_by_id: dict[str, GtfsRoute] = {}
        for row in self.archive.iter_rows("routes.txt"):
            route_id = _cell(row, "route_id")
            agency = classify_agency(_cell(row, "agency_id"), self.agency_table)
            if not route_id or agency is None:
                continue
            routes_by_id[route_id] = GtfsRoute(
                route_id=route_id,
                agency=agency,
                short_name=_cell(row, "route_short_name") or None,
                long_name=_cell(row, "route_long_name") or None,
            )
        logger.info("Routes retained for known agencies: %d", len(routes_by_id))

        trip_index: dict[str, TripRouteEntry] = {}
        shape_by_trip: dict[str, str] = {}
        headsign_votes: dict[tuple[str, str], Counter[str]] = defaultdict(Counter)
        for row in self.archive.iter_rows("trips.txt"):
            trip_id = _cell(row, "trip_id")
            route_id = _cell(row, "route_id")
            if not trip_id or route_id not in routes_by_id:
                continue

            headsign = _cell(row, "trip_headsign") or None
            trip_index[trip_id] = TripRouteEntry(route_id=route_id, headsign=headsign)

            shape_id = _cell(row, "shape_id")
            if shape_id:
                shape_by_trip[trip_id] = shape_id

            direction_id = _cell(row, "direction_id")
            if direction_id and headsign:
                headsign_votes[(route_id, direction_id)][headsign] += 1
        logger.info("Trips indexed: %d", len(trip_index))

        stop_counts: Counter[str] = Counter()
        for row in self.archive.iter_rows("stop_times.txt"):
            trip_id = _cell(row, "trip_id")
            if trip_id in trip_index:
                stop_counts[trip_id] += 1

        # Trips are visited in first-seen order, so ties keep the earlier trip.
        representative_by_route: dict[str, str] = {}
        for trip_id, entry in trip_index.items():
            current = representative_by_route.get(entry.route_id)
            if current is None or stop_counts[trip_id] > stop_counts[current]:
                representative_by_route[entry.route_id] = trip_id
        logger.info("Representative trips selected: %d", len(representative_by_route))

        direction_headsigns: dict[str, dict[str, str]] = {}
        for (route_id, direction_id), votes in headsign_votes.items():
            headsign, _ = votes.most_common(1)[0]
            direction_headsigns.setdefault(route_id, {})[direction_id] = headsign

        return SelectionIndex(
            routes_by_id=routes_by_id,
            trip_index=trip_index,
            representative_by_route=representative_by_route,
            shape_by_selected_trip={
                tid: shape_by_trip[tid]
                for tid in representative_by_route.values()
                if tid in shape_by_trip
            },
            direction_headsigns=direction_headsigns,
        )

    def collection_pass(self, index: SelectionIndex) -> CollectedRows:
        selected_trips = index.selected_trip_ids
        route_by_trip = {tid: rid for rid, tid in index.representative_by_route.items()}

        pending: dict[str, list[tuple[int, str]]] = defaultdict(list)
        stop_agency: dict[str, Agency] = {}
        for row in self.archive.iter_rows("stop_times.txt"):
            trip_id = _cell(row, "trip_id")
            if trip_id not in selected_trips:
                continue
            stop_id = _cell(row, "stop_id")
            seq = _int_cell(row, "stop_sequence")
            if not stop_id or seq is None:
                continue
            pending[trip_id].append((seq, stop_id))
            route = index.routes_by_id[route_by_trip[trip_id]]
            stop_agency.setdefault(stop_id, route.agency)

        stop_ids_by_trip: dict[str, tuple[str, ...]] = {}
        for trip_id, entries in pending.items():
            entries.sort(key=lambda x: x[0])
            stop_ids_by_trip[trip_id] = tuple(sid for _, sid in entries)

        stops_by_id: dict[str, Stop] = {}
        for row in self.archive.iter_rows("stops.txt"):
            stop_id = _cell(row, "stop_id")
            if stop_id not in stop_agency:
                continue
            try:
                location = GeoPoint(
                    lat=round_coord(row["stop_lat"]), lon=round_coord(row["stop_lon"])
                )
            except (KeyError, TypeError, ValueError):
                continue
            stops_by_id[stop_id] = Stop(
                id=stop_id,
                name=_cell(row, "stop_name") or stop_id,
                location=location,
                agency=stop_agency[stop_id],
            )
        logger.info("Stops collected: %d", len(stops_by_id))

        selected_shapes = index.selected_shape_ids
        shape_points: dict[str, list[tuple[int, GeoPoint]]] = defaultdict(list)
        for row in self.archive.iter_rows("shapes.txt"):
            shape_id = _cell(row, "shape_id")
            if shape_id not in selected_shapes:
                continue
            seq = _int_cell(row, "shape_pt_sequence")
            try:
                point = GeoPoint(
                    lat=round_coord(row["shape_pt_lat"]),
                    lon=round_coord(row["shape_pt_lon"]),
                )
            except (KeyError, TypeError, ValueError):
                continue
            shape_points[shape_id].append((seq or 0, point))

        shapes_by_id: dict[str, tuple[GeoPoint, ...]] = {}
        for shape_id, pts in shape_points.items():
            pts.sort(key=lambda x: x[0])
            shapes_by_id[shape_id] = tuple(p for _, p in pts)
        logger.info("Shapes collected: %d", len(shapes_by_id))

        return CollectedRows(
            stop_ids_by_trip=stop_ids_by_trip,
            stops_by_id=stops_by_id,
            shapes_by_id=shapes_by_id,
        )

    def _assemble(self, index: SelectionIndex, rows: CollectedRows) -> Catalog:
        lines_by_id: dict[str, Line] = {}
        manifest_by_route: dict[str, ManifestEntry] = {}
        excluded: dict[str, str] = {}

        for route_id, route in index.routes_by_id.items():
            trip_id = index.representative_by_route.get(route_id)
            if trip_id is None:
                excluded[route_id] = "no trips"
                continue

            stops = tuple(
                replace(rows.stops_by_id[sid], agency=route.agency)
                for sid in rows.stop_ids_by_trip.get(trip_id, ())
                if sid in rows.stops_by_id
            )
            if len(stops) < 2:
                excluded[route_id] = f"{len(stops)} stop(s)"
                logger.debug("Route %s excluded: %s", route_id, excluded[route_id])
                continue

            path: tuple[GeoPoint, ...] = ()
            shape_id = index.shape_by_selected_trip.get(trip_id)
            if shape_id:
                path = rows.shapes_by_id.get(shape_id, ())
            if not path:
                path = tuple(s.location for s in stops)

            short_name = route.display_name
            lines_by_id[route_id] = Line(
                id=route_id,
                short_name=short_name,
                agency=route.agency,
                path=path,
                stops=stops,
            )
            manifest_by_route[route_id] = ManifestEntry(
                route_id=route_id,
                short_name=short_name,
                from_name=stops[0].name,
                to_name=stops[-1].name,
                agency=route.agency,
            )

        report = CompactionReport(
            routes_retained=len(index.routes_by_id),
            trips_indexed=len(index.trip_index),
            lines_written=len(lines_by_id),
            excluded_routes=excluded,
        )
        logger.info(
            "Compaction done: %d lines, %d routes excluded",
            report.lines_written,
            len(excluded),
        )

        return Catalog(
            lines_by_id=lines_by_id,
            index=CatalogIndex(
                stops_by_id=dict(rows.stops_by_id),
                manifest_by_route=manifest_by_route,
                trip_index=index.trip_index,
                direction_headsigns=index.direction_headsigns,
            ),
            report=report,
        )
