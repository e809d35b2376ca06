from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

from src.adapters.realtime.gtfs_rt_decoder import (
    decode_trip_updates,
    decode_vehicle_positions,
)
from src.app.ports.output import IRealtimeFeedProvider
from src.domain.models import RealtimeVehicleFix, TripUpdate


def parse_headers(raw: str | None) -> dict[str, str]:
    raw = (raw or "").strip()
    if not raw:
        return {}
    headers: dict[str, str] = {}
    for part in raw.split(";"):
        part = part.strip()
        if not part or ":" not in part:
            continue
        k, v = part.split(":", 1)
        k = k.strip()
        if k:
            headers[k] = v.strip()
    return headers


@dataclass(slots=True)
class HttpGtfsRealtimeFeedProvider(IRealtimeFeedProvider):
    """Fetches GTFS-Realtime VehiclePositions and TripUpdates over HTTP.

    Env vars:
      - GTFS_RT_VEHICLE_POSITIONS_URL: URL to a VehiclePositions feed
      - GTFS_RT_TRIP_UPDATES_URL: URL to a TripUpdates feed
      - GTFS_RT_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - GTFS_RT_TIMEOUT_S: request timeout (default 10)

    Notes:
      - An unconfigured URL yields an empty feed.
      - Non-2xx responses, timeouts and undecodable payloads raise.
    """

    vehicle_positions_url: str | None = None
    trip_updates_url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.vehicle_positions_url is None:
            self.vehicle_positions_url = os.getenv("GTFS_RT_VEHICLE_POSITIONS_URL")
        if self.trip_updates_url is None:
            self.trip_updates_url = os.getenv("GTFS_RT_TRIP_UPDATES_URL")
        if self.headers_raw is None:
            self.headers_raw = os.getenv("GTFS_RT_HEADERS")
        if os.getenv("GTFS_RT_TIMEOUT_S"):
            self.timeout_s = float(os.environ["GTFS_RT_TIMEOUT_S"])

    async def _get(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.timeout_s, transport=self.transport
        ) as client:
            resp = await client.get(url, headers=parse_headers(self.headers_raw))
            resp.raise_for_status()
            return resp.content

    async def fetch_vehicle_positions(self) -> tuple[RealtimeVehicleFix, ...]:
        if not self.vehicle_positions_url:
            return ()
        return decode_vehicle_positions(await self._get(self.vehicle_positions_url))

    async def fetch_trip_updates(self) -> tuple[TripUpdate, ...]:
        if not self.trip_updates_url:
            return ()
        return decode_trip_updates(await self._get(self.trip_updates_url))
