from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from src.app.ports.output import ILineContractorProvider

logger = logging.getLogger(__name__)


def parse_line_contractors(payload: Any) -> dict[str, str]:
    """Map line ``gid`` to contractor name from a lines API response.

    The response groups lines per transport mode:
    ``{"bus": [{"gid": 9011001000400000, "contractor": {"name": ...}}], ...}``.
    """

    out: dict[str, str] = {}
    if not isinstance(payload, dict):
        return out
    for lines in payload.values():
        if not isinstance(lines, list):
            continue
        for line in lines:
            if not isinstance(line, dict):
                continue
            gid = line.get("gid")
            contractor = line.get("contractor") or {}
            name = contractor.get("name") if isinstance(contractor, dict) else None
            if gid is not None and name:
                out[str(gid)] = str(name)
    return out


@dataclass(slots=True)
class HttpLineContractorProvider(ILineContractorProvider):
    """Reads line contractors from the public lines API.

    Env vars:
      - LINES_API_URL: e.g. https://transport.integration.sl.se/v1/lines?transport_authority_id=1
      - LINES_API_TIMEOUT_S (default 10)

    Notes:
      - Line ids are matched against GTFS route ids.
      - Any transport, status or JSON error yields an empty mapping.
      - The first non-empty table is kept for the life of the instance.
    """

    url: str | None = None
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    _contractors: dict[str, str] | None = None

    def __post_init__(self) -> None:
        if self.url is None:
            self.url = os.getenv("LINES_API_URL")
        if os.getenv("LINES_API_TIMEOUT_S"):
            self.timeout_s = float(os.environ["LINES_API_TIMEOUT_S"])

    async def get_route_contractors(self) -> dict[str, str]:
        if self._contractors is not None:
            return self._contractors
        if not self.url:
            return {}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(self.url)
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Line contractor fetch failed: %s", exc)
            return {}

        contractors = parse_line_contractors(payload)
        if contractors:
            self._contractors = contractors
        return contractors
