from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from src.app.ports.output import (
    ICatalogRepository,
    ILineContractorProvider,
    IRealtimeFeedProvider,
)
from src.domain.algorithms.reconciliation import reconcile_vehicles
from src.domain.models import Agency, VehicleState

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RealtimeReconcilerService:
    """Produces one enriched vehicle list per poll cycle.

    Both feeds are fetched concurrently. Any fetch or decode failure degrades
    the cycle to an empty list; the next poll simply tries again. No state is
    kept between cycles, so overlapping calls are safe.
    """

    catalog_repository: ICatalogRepository
    feed_provider: IRealtimeFeedProvider | None = None
    contractor_provider: ILineContractorProvider | None = None
    cycle_timeout_s: float = 15.0

    async def _route_contractors(self) -> dict[str, str]:
        if self.contractor_provider is None:
            return {}
        return await self.contractor_provider.get_route_contractors()

    async def list_vehicles(
        self, *, agency: Agency | None = None
    ) -> tuple[VehicleState, ...]:
        if self.feed_provider is None:
            return ()

        try:
            positions, updates = await asyncio.wait_for(
                asyncio.gather(
                    self.feed_provider.fetch_vehicle_positions(),
                    self.feed_provider.fetch_trip_updates(),
                    return_exceptions=True,
                ),
                timeout=self.cycle_timeout_s,
            )
        except asyncio.TimeoutError:
            logger.warning("Realtime cycle timed out after %.1fs", self.cycle_timeout_s)
            return ()

        for name, result in (("vehicle positions", positions), ("trip updates", updates)):
            if isinstance(result, BaseException):
                logger.warning(
                    "Realtime %s fetch failed: %s: %s",
                    name,
                    type(result).__name__,
                    result,
                )
                return ()

        catalog = self.catalog_repository.load_index()
        return reconcile_vehicles(
            positions,
            updates,
            catalog,
            agency=agency,
            route_contractors=await self._route_contractors(),
        )

    async def find_vehicle(self, number: str) -> VehicleState | None:
        number = (number or "").strip()
        if not number:
            return None
        for v in await self.list_vehicles():
            if v.vehicle_number == number or v.id.endswith(number):
                return v
        return None
