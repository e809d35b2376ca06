from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.adapters.persistence import JsonCatalogRepository
from src.adapters.persistence.catalog_codec import line_key
from src.domain.exceptions import CatalogNotFound
from src.domain.models import (
    Agency,
    Catalog,
    CatalogIndex,
    GeoPoint,
    Line,
    ManifestEntry,
    Stop,
    TripRouteEntry,
    VehicleKind,
    VehicleState,
)


def _catalog() -> Catalog:
    a = Stop(id="A", name="Slussen", location=GeoPoint(lat=59.31951, lon=18.07225), agency=Agency.SL)
    b = Stop(id="B", name="Radiohuset", location=GeoPoint(lat=59.3331, lon=18.0201), agency=Agency.SL)
    line = Line(
        id="9011001000400000",
        short_name="4",
        agency=Agency.SL,
        path=(a.location, b.location),
        stops=(a, b),
    )
    return Catalog(
        lines_by_id={line.id: line},
        index=CatalogIndex(
            stops_by_id={"A": a, "B": b},
            manifest_by_route={
                line.id: ManifestEntry(
                    route_id=line.id,
                    short_name="4",
                    from_name="Slussen",
                    to_name="Radiohuset",
                    agency=Agency.SL,
                )
            },
            trip_index={
                "T1": TripRouteEntry(route_id=line.id, headsign="Radiohuset"),
                "T2": TripRouteEntry(route_id=line.id),
            },
            direction_headsigns={line.id: {"0": "Radiohuset"}},
        ),
    )


def test_save_writes_frontend_documents(tmp_path: Path) -> None:
    JsonCatalogRepository(base_path=tmp_path).save_catalog(_catalog())

    trip_map = json.loads((tmp_path / "trip-to-route.json").read_text())
    assert trip_map == {
        "T1": {"r": "9011001000400000", "h": "Radiohuset"},
        "T2": {"r": "9011001000400000"},
    }

    line = json.loads((tmp_path / "lines" / "9011001000400000.json").read_text())
    assert line["shortName"] == "4"
    assert line["path"][0] == [59.31951, 18.07225]
    assert line["stops"][1]["lng"] == 18.0201

    manifest = json.loads((tmp_path / "manifest.json").read_text())
    assert manifest[0]["from"] == "Slussen"
    assert manifest[0]["to"] == "Radiohuset"


def test_fresh_repository_reads_back_same_index(tmp_path: Path) -> None:
    catalog = _catalog()
    JsonCatalogRepository(base_path=tmp_path).save_catalog(catalog)

    repo = JsonCatalogRepository(base_path=tmp_path)
    assert repo.load_index() == catalog.index
    assert repo.get_line("9011001000400000") == catalog.lines_by_id["9011001000400000"]
    assert repo.get_line("missing") is None


def test_save_replaces_stale_line_documents(tmp_path: Path) -> None:
    stale = tmp_path / "lines" / "old.json"
    stale.parent.mkdir(parents=True)
    stale.write_text("{}")

    JsonCatalogRepository(base_path=tmp_path).save_catalog(_catalog())

    assert not stale.exists()


def test_load_index_without_catalog_raises(tmp_path: Path) -> None:
    with pytest.raises(CatalogNotFound):
        JsonCatalogRepository(base_path=tmp_path).load_index()


def test_catalog_dir_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATALOG_DIR", str(tmp_path))
    JsonCatalogRepository().save_catalog(_catalog())

    assert (tmp_path / "stops.json").is_file()


def test_line_keys_stay_distinct_after_sanitizing() -> None:
    assert line_key("9011001000400000") == "lines/9011001000400000.json"
    assert line_key("a/b") != line_key("a_b")
    assert line_key("a/b") != line_key("a b")
    assert line_key("a/b").startswith("lines/a_b-")
    assert line_key("a/b") == line_key("a/b")


def test_colliding_route_ids_get_separate_documents(tmp_path: Path) -> None:
    base = _catalog()
    template = base.lines_by_id["9011001000400000"]
    lines = {
        rid: Line(
            id=rid,
            short_name=name,
            agency=template.agency,
            path=template.path,
            stops=template.stops,
        )
        for rid, name in (("a/b", "slash"), ("a_b", "underscore"))
    }
    repo = JsonCatalogRepository(base_path=tmp_path)
    repo.save_catalog(Catalog(lines_by_id=lines, index=base.index))

    assert repo.get_line("a/b").short_name == "slash"
    assert repo.get_line("a_b").short_name == "underscore"


def test_save_vehicles_writes_snapshot_document(tmp_path: Path) -> None:
    vehicle = VehicleState(
        id="9031001004501234",
        route_id="9011001000400000",
        trip_id="T1",
        agency=Agency.SL,
        operator="SL",
        kind=VehicleKind.BUS,
        vehicle_number="1234",
        lat=59.33,
        lon=18.07,
        bearing=90.0,
        speed_kmh=36.0,
        destination="Radiohuset",
        delay_s=None,
    )
    fetched_at = datetime(2026, 1, 8, 7, 0, tzinfo=timezone.utc)
    repo = JsonCatalogRepository(base_path=tmp_path)

    repo.save_vehicles((vehicle,), cycle=3, fetched_at=fetched_at)
    repo.save_catalog(_catalog())

    doc = json.loads((tmp_path / "vehicles.json").read_text(encoding="utf-8"))
    assert doc["cycle"] == 3
    assert doc["fetchedAt"] == "2026-01-08T07:00:00+00:00"
    (v,) = doc["vehicles"]
    assert v["lng"] == 18.07
    assert v["delaySec"] is None
    assert v["punctuality"] == "unknown"
    assert not (tmp_path / "vehicles.json.tmp").exists()
