class CatalogError(Exception):
    """Base exception for schedule catalog failures."""


class MissingTableError(CatalogError):
    """Raised when the schedule archive lacks a required table."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Missing table in schedule archive: {table}")
        self.table = table


class CatalogNotFound(CatalogError):
    """Raised when no compacted catalog has been published yet."""
