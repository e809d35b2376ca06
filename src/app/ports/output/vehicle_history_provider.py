from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import HistoryPoint


class IVehicleHistoryProvider(ABC):
    """Port returning the recorded, time-ordered fixes of one trip."""

    @abstractmethod
    async def get_history(self, trip_id: str) -> tuple[HistoryPoint, ...]:
        raise NotImplementedError
