from __future__ import annotations

import json
from pathlib import Path

from src.compactor import main

TABLES = {
    "routes.txt": "route_id,agency_id,route_short_name,route_long_name\n"
    "R1,505000000000000001,4,\n"
    "R2,999,77,\n",
    "trips.txt": "route_id,service_id,trip_id,trip_headsign,direction_id,shape_id\n"
    "R1,1,T1,Radiohuset,0,SH1\n"
    "R2,1,T2,,0,\n",
    "stop_times.txt": "trip_id,arrival_time,departure_time,stop_id,stop_sequence\n"
    "T1,08:00:00,08:00:00,A,1\n"
    "T1,08:05:00,08:05:00,B,2\n"
    "T2,08:00:00,08:00:00,A,1\n",
    "stops.txt": "stop_id,stop_name,stop_lat,stop_lon\n"
    "A,Slussen,59.319512,18.072251\n"
    "B,Radiohuset,59.333101,18.020102\n",
    "shapes.txt": "shape_id,shape_pt_lat,shape_pt_lon,shape_pt_sequence\n",
}


def _archive(tmp_path: Path, *, skip: str | None = None) -> Path:
    base = tmp_path / "gtfs"
    base.mkdir()
    for name, content in TABLES.items():
        if name != skip:
            (base / name).write_text(content, encoding="utf-8")
    return base


def test_cli_writes_catalog(tmp_path: Path) -> None:
    out = tmp_path / "out"

    code = main(["--archive", str(_archive(tmp_path)), "--out", str(out)])

    assert code == 0
    manifest = json.loads((out / "manifest.json").read_text(encoding="utf-8"))
    assert [m["id"] for m in manifest] == ["R1"]
    line = json.loads((out / "lines" / "R1.json").read_text(encoding="utf-8"))
    # No shape points: the path follows the stops.
    assert line["path"] == [[59.31951, 18.07225], [59.3331, 18.0201]]


def test_cli_reports_missing_table(tmp_path: Path, caplog) -> None:
    out = tmp_path / "out"

    code = main(["--archive", str(_archive(tmp_path, skip="shapes.txt")), "--out", str(out)])

    assert code == 1
    assert "shapes.txt" in caplog.text
    assert not out.exists()


def test_cli_reports_missing_archive(tmp_path: Path) -> None:
    code = main(["--archive", str(tmp_path / "missing.zip"), "--out", str(tmp_path / "out")])
    assert code == 1
