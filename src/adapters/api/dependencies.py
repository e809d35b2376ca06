from __future__ import annotations

import os
from functools import lru_cache

from src.adapters.history.http_vehicle_history_provider import (
    HttpVehicleHistoryProvider,
)
from src.adapters.persistence import JsonCatalogRepository, S3CatalogRepository
from src.adapters.realtime.http_gtfs_realtime_feed_provider import (
    HttpGtfsRealtimeFeedProvider,
)
from src.adapters.realtime.http_line_contractor_provider import (
    HttpLineContractorProvider,
)
from src.app.ports.output import ICatalogRepository, ILineContractorProvider
from src.app.services.catalog_service import CatalogService
from src.app.services.passage_service import PassageService
from src.app.services.realtime_reconciler_service import RealtimeReconcilerService


@lru_cache(maxsize=1)
def get_catalog_repository() -> ICatalogRepository:
    # One instance per process so the loaded index is reused across requests.
    if os.getenv("CATALOG_BUCKET"):
        return S3CatalogRepository()
    return JsonCatalogRepository()


@lru_cache(maxsize=1)
def get_line_contractor_provider() -> ILineContractorProvider | None:
    # Shared so the contractor table is fetched once per process.
    if os.getenv("LINES_API_URL"):
        return HttpLineContractorProvider()
    return None


def get_catalog_service() -> CatalogService:
    return CatalogService(catalog_repository=get_catalog_repository())


def get_reconciler_service() -> RealtimeReconcilerService:
    provider = None
    if os.getenv("GTFS_RT_VEHICLE_POSITIONS_URL"):
        provider = HttpGtfsRealtimeFeedProvider()

    service = RealtimeReconcilerService(
        catalog_repository=get_catalog_repository(),
        feed_provider=provider,
        contractor_provider=get_line_contractor_provider(),
    )
    if os.getenv("REALTIME_CYCLE_TIMEOUT_S"):
        service.cycle_timeout_s = float(os.environ["REALTIME_CYCLE_TIMEOUT_S"])
    return service


def get_passage_service() -> PassageService:
    history = None
    if os.getenv("VEHICLE_HISTORY_URL"):
        history = HttpVehicleHistoryProvider()
    return PassageService(
        catalog_repository=get_catalog_repository(), history_provider=history
    )
