from __future__ import annotations

import csv
import io
import os
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from src.app.ports.output import IGtfsArchive
from src.domain.exceptions import MissingTableError


@dataclass(slots=True)
class ZipGtfsArchive(IGtfsArchive):
    """Streams GTFS tables straight out of a zip file, one member at a time.

    Env vars:
      - GTFS_ARCHIVE: path to the GTFS zip (default: data/raw/sweden.zip)
    """

    path: str | Path | None = None

    def _path(self) -> Path:
        return Path(self.path or os.getenv("GTFS_ARCHIVE") or "data/raw/sweden.zip")

    def _member(self, zf: zipfile.ZipFile, name: str) -> str | None:
        # Some exports nest the tables one directory deep.
        for member in zf.namelist():
            if member == name or member.endswith("/" + name):
                return member
        return None

    def has_table(self, name: str) -> bool:
        with zipfile.ZipFile(self._path()) as zf:
            return self._member(zf, name) is not None

    def iter_rows(self, name: str) -> Iterator[dict[str, str]]:
        with zipfile.ZipFile(self._path()) as zf:
            member = self._member(zf, name)
            if member is None:
                raise MissingTableError(name)
            with zf.open(member) as raw:
                text = io.TextIOWrapper(raw, encoding="utf-8-sig", newline="")
                yield from csv.DictReader(text)


@dataclass(slots=True)
class DirectoryGtfsArchive(IGtfsArchive):
    """Reads GTFS tables from a directory of extracted .txt files."""

    base_path: str | Path | None = None

    def _base(self) -> Path:
        return Path(self.base_path or os.getenv("GTFS_ARCHIVE") or "data/gtfs")

    def has_table(self, name: str) -> bool:
        return (self._base() / name).is_file()

    def iter_rows(self, name: str) -> Iterator[dict[str, str]]:
        path = self._base() / name
        if not path.is_file():
            raise MissingTableError(name)
        with path.open("r", encoding="utf-8-sig", newline="") as fp:
            yield from csv.DictReader(fp)


def open_gtfs_archive(path: str | Path | None = None) -> IGtfsArchive:
    value = Path(path or os.getenv("GTFS_ARCHIVE") or "data/raw/sweden.zip")
    if value.is_dir():
        return DirectoryGtfsArchive(base_path=value)
    return ZipGtfsArchive(path=value)
