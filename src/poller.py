from __future__ import annotations

import asyncio
import itertools
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.adapters.api.dependencies import get_catalog_repository, get_reconciler_service
from src.app.ports.output import ICatalogRepository
from src.app.services.realtime_reconciler_service import RealtimeReconcilerService
from src.domain.exceptions import CatalogNotFound
from src.domain.models import Agency, VehicleState

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VehicleSnapshot:
    """Latest published vehicle list.

    Cycles may overlap; a result is only accepted if no newer cycle has
    already published, so a slow earlier cycle never overwrites fresher data.
    """

    vehicles: tuple[VehicleState, ...] = ()
    cycle: int = -1

    def publish(self, *, cycle: int, vehicles: tuple[VehicleState, ...]) -> bool:
        if cycle < self.cycle:
            return False
        self.cycle = cycle
        self.vehicles = vehicles
        return True


@dataclass(slots=True)
class RealtimePoller:
    """Polls the realtime feeds and publishes each accepted snapshot.

    Accepted snapshots are written as ``vehicles.json`` through the catalog
    repository, next to the static catalog the map frontend already reads.
    """

    service: RealtimeReconcilerService
    publisher: ICatalogRepository | None = None
    interval_s: float = 10.0
    agency: Agency | None = None
    snapshot: VehicleSnapshot = field(default_factory=VehicleSnapshot)

    _counter: itertools.count = field(default_factory=itertools.count, repr=False)

    async def run_cycle(self) -> bool:
        cycle = next(self._counter)
        try:
            vehicles = await self.service.list_vehicles(agency=self.agency)
        except CatalogNotFound as exc:
            logger.error("Cycle %d skipped: %s", cycle, exc)
            return False
        except Exception:
            logger.exception("Cycle %d failed", cycle)
            return False

        # No await between accepting and writing, so writes keep cycle order.
        accepted = self.snapshot.publish(cycle=cycle, vehicles=vehicles)
        if not accepted:
            logger.debug("Cycle %d finished late; result discarded", cycle)
            return False

        if self.publisher is not None:
            try:
                self.publisher.save_vehicles(
                    vehicles, cycle=cycle, fetched_at=datetime.now(timezone.utc)
                )
            except Exception:
                logger.exception("Cycle %d: publishing vehicles failed", cycle)
                return False
        logger.info("Cycle %d: %d vehicles", cycle, len(vehicles))
        return True

    async def run(self, *, loop: bool = True) -> None:
        # Cycles are started on a fixed cadence and may overlap.
        pending: set[asyncio.Task[bool]] = set()
        while True:
            task = asyncio.create_task(self.run_cycle())
            pending.add(task)
            task.add_done_callback(pending.discard)
            if not loop:
                await asyncio.gather(*pending)
                return
            await asyncio.sleep(self.interval_s)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    agency_raw = (os.getenv("POLL_AGENCY") or "").strip()
    poller = RealtimePoller(
        service=get_reconciler_service(),
        publisher=get_catalog_repository(),
        interval_s=float(os.getenv("POLL_INTERVAL_S", "10")),
        agency=Agency(agency_raw) if agency_raw else None,
    )
    loop = os.getenv("POLL_LOOP", "1").strip().lower() not in {"0", "false", "no"}
    asyncio.run(poller.run(loop=loop))


if __name__ == "__main__":
    main()
