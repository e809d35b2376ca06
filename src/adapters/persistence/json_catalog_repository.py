from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from src.adapters.persistence.catalog_codec import (
    DIRECTIONS_KEY,
    LINES_DIR,
    MANIFEST_KEY,
    STOPS_KEY,
    TRIP_INDEX_KEY,
    VEHICLES_KEY,
    catalog_documents,
    index_from_documents,
    line_from_dict,
    line_key,
    vehicles_document,
)
from src.app.ports.output import ICatalogRepository
from src.domain.exceptions import CatalogNotFound
from src.domain.models import Catalog, CatalogIndex, Line, VehicleState

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JsonCatalogRepository(ICatalogRepository):
    """Catalog stored as static JSON files.

    Layout: ``lines/<route_id>.json``, ``stops.json``, ``manifest.json``,
    ``trip-to-route.json``, ``route-directions.json``.

    Env vars:
      - CATALOG_DIR: output/input directory (default: public/data)

    Notes:
      - The index is loaded once per repository instance and then reused.
    """

    base_path: str | Path | None = None

    _index: CatalogIndex | None = None

    def _base(self) -> Path:
        return Path(self.base_path or os.getenv("CATALOG_DIR") or "public/data")

    def save_catalog(self, catalog: Catalog) -> None:
        base = self._base()
        lines_dir = base / LINES_DIR
        if lines_dir.exists():
            shutil.rmtree(lines_dir)
        lines_dir.mkdir(parents=True, exist_ok=True)

        docs = catalog_documents(catalog)
        for key, doc in docs.items():
            path = base / key
            path.write_text(
                json.dumps(doc, ensure_ascii=False, separators=(",", ":")),
                encoding="utf-8",
            )
        logger.info("Wrote %d catalog documents to %s", len(docs), base)
        self._index = catalog.index

    def _read(self, key: str, *, required: bool = True) -> Any:
        path = self._base() / key
        if not path.is_file():
            if required:
                raise CatalogNotFound(f"Catalog document not found: {path}")
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def load_index(self) -> CatalogIndex:
        if self._index is not None:
            return self._index

        self._index = index_from_documents(
            stops=self._read(STOPS_KEY),
            manifest=self._read(MANIFEST_KEY),
            trip_index=self._read(TRIP_INDEX_KEY),
            directions=self._read(DIRECTIONS_KEY, required=False),
        )
        return self._index

    def get_line(self, route_id: str) -> Line | None:
        raw = self._read(line_key(route_id), required=False)
        if raw is None:
            return None
        return line_from_dict(raw)

    def save_vehicles(
        self, vehicles: tuple[VehicleState, ...], *, cycle: int, fetched_at: datetime
    ) -> None:
        base = self._base()
        base.mkdir(parents=True, exist_ok=True)
        doc = vehicles_document(vehicles, cycle=cycle, fetched_at=fetched_at)
        # Write then rename so readers never see a half-written snapshot.
        tmp = base / f"{VEHICLES_KEY}.tmp"
        tmp.write_text(
            json.dumps(doc, ensure_ascii=False, separators=(",", ":")),
            encoding="utf-8",
        )
        tmp.replace(base / VEHICLES_KEY)
