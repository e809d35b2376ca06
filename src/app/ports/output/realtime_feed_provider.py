from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import RealtimeVehicleFix, TripUpdate


class IRealtimeFeedProvider(ABC):
    """Port for the two GTFS-Realtime feeds (vehicle positions, trip updates).

    Implementations may raise on transport or decode errors; callers decide
    how to degrade.
    """

    @abstractmethod
    async def fetch_vehicle_positions(self) -> tuple[RealtimeVehicleFix, ...]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_trip_updates(self) -> tuple[TripUpdate, ...]:
        raise NotImplementedError
