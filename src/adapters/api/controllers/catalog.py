from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_catalog_service
from src.adapters.api.schemas.catalog import (
    LineSchema,
    ManifestEntrySchema,
    SearchHitSchema,
    StopSchema,
)
from src.app.services.catalog_service import CatalogService
from src.domain.models import Agency, Stop

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _stop_to_schema(s: Stop) -> StopSchema:
    return StopSchema(
        id=s.id,
        name=s.name,
        lat=s.location.lat,
        lng=s.location.lon,
        agency=s.agency.value if s.agency else None,
    )


@router.get("/manifest", response_model=list[ManifestEntrySchema])
def list_manifest(
    agency: Agency | None = Query(default=None),
    service: CatalogService = Depends(get_catalog_service),
) -> list[ManifestEntrySchema]:
    return [
        ManifestEntrySchema(
            id=e.route_id,
            short_name=e.short_name,
            from_name=e.from_name,
            to_name=e.to_name,
            agency=e.agency.value,
        )
        for e in service.manifest(agency=agency)
    ]


@router.get("/lines/{route_id}", response_model=LineSchema)
def get_line(
    route_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> LineSchema:
    line = service.line(route_id)
    if line is None:
        raise HTTPException(status_code=404, detail="Line not found")
    return LineSchema(
        id=line.id,
        short_name=line.short_name,
        agency=line.agency.value,
        path=[(p.lat, p.lon) for p in line.path],
        stops=[_stop_to_schema(s) for s in line.stops],
    )


@router.get("/stops/{stop_id}", response_model=StopSchema)
def get_stop(
    stop_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> StopSchema:
    stop = service.stop(stop_id)
    if stop is None:
        raise HTTPException(status_code=404, detail="Stop not found")
    return _stop_to_schema(stop)


@router.get("/search", response_model=list[SearchHitSchema])
def search(
    q: str = Query(default=""),
    agency: Agency = Query(default=Agency.SL),
    service: CatalogService = Depends(get_catalog_service),
) -> list[SearchHitSchema]:
    return [
        SearchHitSchema(
            type=h.kind,
            id=h.id,
            title=h.title,
            subtitle=h.subtitle,
            agency=h.agency.value,
        )
        for h in service.search(q, agency=agency)
    ]
