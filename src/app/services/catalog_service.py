from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from src.app.ports.output import ICatalogRepository
from src.domain.models import Agency, Line, ManifestEntry, Stop

MAX_SEARCH_RESULTS = 15


@dataclass(frozen=True, slots=True)
class SearchHit:
    kind: Literal["line", "stop"]
    id: str
    title: str
    subtitle: str
    agency: Agency


@dataclass(slots=True)
class CatalogService:
    """Read-side queries over the published catalog."""

    catalog_repository: ICatalogRepository

    def manifest(self, *, agency: Agency | None = None) -> tuple[ManifestEntry, ...]:
        entries = self.catalog_repository.load_index().manifest_by_route.values()
        return tuple(e for e in entries if agency is None or e.agency == agency)

    def line(self, route_id: str) -> Line | None:
        return self.catalog_repository.get_line(route_id)

    def stop(self, stop_id: str) -> Stop | None:
        return self.catalog_repository.load_index().stops_by_id.get(stop_id)

    def search(self, query: str, *, agency: Agency = Agency.SL) -> tuple[SearchHit, ...]:
        """Lines whose short name starts with ``query``, then matching stops."""

        q = (query or "").strip().lower()
        if not q:
            return ()

        index = self.catalog_repository.load_index()
        hits: list[SearchHit] = []
        for entry in index.manifest_by_route.values():
            if entry.agency != agency or not entry.short_name.lower().startswith(q):
                continue
            hits.append(
                SearchHit(
                    kind="line",
                    id=entry.route_id,
                    title=f"Line {entry.short_name}",
                    subtitle=f"{entry.from_name} - {entry.to_name}",
                    agency=entry.agency,
                )
            )

        stop_subtitle = "Pier" if agency == Agency.WAAB else "Stop"
        for stop in index.stops_by_id.values():
            if len(hits) >= MAX_SEARCH_RESULTS:
                break
            if (stop.agency or Agency.SL) != agency or q not in stop.name.lower():
                continue
            hits.append(
                SearchHit(
                    kind="stop",
                    id=stop.id,
                    title=stop.name,
                    subtitle=stop_subtitle,
                    agency=agency,
                )
            )

        return tuple(hits[:MAX_SEARCH_RESULTS])
