from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo

from src.app.ports.output import ICatalogRepository, IVehicleHistoryProvider
from src.domain.algorithms.passage_detector import detect_passages
from src.domain.models import StopPassage


@dataclass(slots=True)
class PassageService:
    """Which stops of a line a vehicle has passed or dwelled at.

    Env vars:
      - PASSAGE_TIMEZONE: IANA zone for arrival times (default: system local)
    """

    catalog_repository: ICatalogRepository
    history_provider: IVehicleHistoryProvider | None = None
    timezone: tzinfo | None = None

    def __post_init__(self) -> None:
        if self.timezone is None and os.getenv("PASSAGE_TIMEZONE"):
            self.timezone = ZoneInfo(os.environ["PASSAGE_TIMEZONE"])

    async def passages(self, *, trip_id: str, route_id: str) -> dict[str, StopPassage]:
        if self.history_provider is None or not trip_id or not route_id:
            return {}

        line = self.catalog_repository.get_line(route_id)
        if line is None:
            return {}

        history = await self.history_provider.get_history(trip_id)
        return detect_passages(history, line.stops, tz=self.timezone)
