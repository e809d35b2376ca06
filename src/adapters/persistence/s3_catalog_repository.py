from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from botocore.exceptions import ClientError

from src.adapters.aws import s3_client
from src.adapters.persistence.catalog_codec import (
    DIRECTIONS_KEY,
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
class S3CatalogRepository(ICatalogRepository):
    """Catalog published as JSON objects in S3, same layout as on disk.

    Env vars:
      - CATALOG_BUCKET (required)
      - CATALOG_PREFIX (default: catalog)
      - ENDPOINT_URL (preferred for LocalStack)
      - AWS_REGION
    """

    bucket: str | None = None
    prefix: str | None = None

    _index: CatalogIndex | None = None

    def _bucket(self) -> str:
        value = self.bucket or os.getenv("CATALOG_BUCKET")
        if not value:
            raise RuntimeError("Missing CATALOG_BUCKET")
        return value

    def _prefix(self) -> str:
        return (self.prefix or os.getenv("CATALOG_PREFIX") or "catalog").strip("/")

    def _key(self, relative: str) -> str:
        return f"{self._prefix()}/{relative}"

    def save_catalog(self, catalog: Catalog) -> None:
        s3 = s3_client()
        bucket = self._bucket()
        docs = catalog_documents(catalog)
        for relative, doc in docs.items():
            s3.put_object(
                Bucket=bucket,
                Key=self._key(relative),
                Body=json.dumps(doc, ensure_ascii=False).encode("utf-8"),
                ContentType="application/json",
            )
        logger.info("Uploaded %d catalog documents to s3://%s", len(docs), bucket)
        self._index = catalog.index

    def _read(self, relative: str, *, required: bool = True) -> Any:
        s3 = s3_client()
        key = self._key(relative)
        try:
            obj = s3.get_object(Bucket=self._bucket(), Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code not in {"NoSuchKey", "404"}:
                raise
            if required:
                raise CatalogNotFound(f"Catalog object not found: {key}") from exc
            return None
        return json.loads(obj["Body"].read())

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
        doc = vehicles_document(vehicles, cycle=cycle, fetched_at=fetched_at)
        s3_client().put_object(
            Bucket=self._bucket(),
            Key=self._key(VEHICLES_KEY),
            Body=json.dumps(doc, ensure_ascii=False).encode("utf-8"),
            ContentType="application/json",
            CacheControl="no-cache",
        )
