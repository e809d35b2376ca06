from .catalog import CatalogError, CatalogNotFound, MissingTableError

__all__ = ["CatalogError", "CatalogNotFound", "MissingTableError"]
