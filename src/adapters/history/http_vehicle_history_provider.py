from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from src.app.ports.output import IVehicleHistoryProvider
from src.domain.models import HistoryPoint

logger = logging.getLogger(__name__)


def _parse_point(raw: Any) -> HistoryPoint | None:
    try:
        ts_ms = float(raw["ts"])
        return HistoryPoint(
            lat=float(raw["lat"]),
            lon=float(raw["lng"]),
            timestamp=datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        return None


@dataclass(slots=True)
class HttpVehicleHistoryProvider(IVehicleHistoryProvider):
    """Reads a trip's recorded trajectory from the history endpoint.

    Expects ``GET <url>?tripId=<id>`` to answer ``{"path": [{lat, lng, ts}]}``
    with ``ts`` in epoch milliseconds.

    Env vars:
      - VEHICLE_HISTORY_URL
      - VEHICLE_HISTORY_TIMEOUT_S (default 10)
    """

    url: str | None = None
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.url is None:
            self.url = os.getenv("VEHICLE_HISTORY_URL")
        if os.getenv("VEHICLE_HISTORY_TIMEOUT_S"):
            self.timeout_s = float(os.environ["VEHICLE_HISTORY_TIMEOUT_S"])

    async def get_history(self, trip_id: str) -> tuple[HistoryPoint, ...]:
        if not self.url or not trip_id:
            return ()

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(self.url, params={"tripId": trip_id})
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("History fetch for trip %s failed: %s", trip_id, exc)
            return ()

        raw_points = payload.get("path") if isinstance(payload, dict) else None
        points = (_parse_point(p) for p in (raw_points or ()))
        out = [p for p in points if p is not None]
        out.sort(key=lambda p: p.timestamp)
        return tuple(out)
