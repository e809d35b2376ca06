from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from src.domain.models import Catalog, CatalogIndex, Line, VehicleState


class ICatalogRepository(ABC):
    """Port for publishing and reading the compacted catalog."""

    @abstractmethod
    def save_catalog(self, catalog: Catalog) -> None:
        raise NotImplementedError

    @abstractmethod
    def load_index(self) -> CatalogIndex:
        raise NotImplementedError

    @abstractmethod
    def get_line(self, route_id: str) -> Line | None:
        raise NotImplementedError

    @abstractmethod
    def save_vehicles(
        self, vehicles: tuple[VehicleState, ...], *, cycle: int, fetched_at: datetime
    ) -> None:
        """Publish the latest accepted vehicle snapshot next to the catalog."""
        raise NotImplementedError
