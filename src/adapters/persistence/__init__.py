from .json_catalog_repository import JsonCatalogRepository
from .local_gtfs_archive import DirectoryGtfsArchive, ZipGtfsArchive
from .s3_catalog_repository import S3CatalogRepository

__all__ = [
    "DirectoryGtfsArchive",
    "JsonCatalogRepository",
    "S3CatalogRepository",
    "ZipGtfsArchive",
]
