from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class IGtfsArchive(ABC):
    """Port for streaming rows out of a static GTFS archive."""

    @abstractmethod
    def has_table(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def iter_rows(self, name: str) -> Iterator[dict[str, str]]:
        """Yield one dict per CSV row of ``name`` (e.g. ``stops.txt``).

        Implementations must stream; a table may be read more than once.
        """
        raise NotImplementedError
