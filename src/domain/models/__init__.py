from .agency import Agency, VehicleKind
from .geo import GeoPoint
from .gtfs import (
    Catalog,
    CatalogIndex,
    CompactionReport,
    GtfsRoute,
    Line,
    ManifestEntry,
    TripRouteEntry,
)
from .history import HistoryPoint, StopPassage
from .realtime import (
    Punctuality,
    RealtimeVehicleFix,
    StopTimeUpdate,
    TripUpdate,
    VehicleState,
)
from .stop import Stop

__all__ = [
    "Agency",
    "Catalog",
    "CatalogIndex",
    "CompactionReport",
    "GeoPoint",
    "GtfsRoute",
    "HistoryPoint",
    "Line",
    "ManifestEntry",
    "Punctuality",
    "RealtimeVehicleFix",
    "Stop",
    "StopPassage",
    "StopTimeUpdate",
    "TripRouteEntry",
    "TripUpdate",
    "VehicleKind",
    "VehicleState",
]
