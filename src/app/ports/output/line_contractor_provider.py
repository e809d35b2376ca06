from __future__ import annotations

from abc import ABC, abstractmethod


class ILineContractorProvider(ABC):
    """Port for the operating contractor of each line, keyed by route id."""

    @abstractmethod
    async def get_route_contractors(self) -> dict[str, str]:
        """Return ``{route_id: contractor name}``; empty when unavailable."""
        raise NotImplementedError
