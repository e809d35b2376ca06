from .catalog_repository import ICatalogRepository
from .gtfs_archive import IGtfsArchive
from .line_contractor_provider import ILineContractorProvider
from .realtime_feed_provider import IRealtimeFeedProvider
from .vehicle_history_provider import IVehicleHistoryProvider

__all__ = [
    "ICatalogRepository",
    "IGtfsArchive",
    "ILineContractorProvider",
    "IRealtimeFeedProvider",
    "IVehicleHistoryProvider",
]
