from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from src.domain.algorithms.geo_utils import EARTH_RADIUS_M
from src.domain.algorithms.passage_detector import detect_passages, format_dwell
from src.domain.models import GeoPoint, HistoryPoint, Stop

STOP = Stop(id="S1", name="Slussen", location=GeoPoint(lat=59.0, lon=18.0))
T0 = datetime(2026, 1, 8, 8, 5, 30, tzinfo=timezone.utc)


def _at(distance_m: float, seconds: float, stop: Stop = STOP) -> HistoryPoint:
    """A fix ``distance_m`` due north of ``stop``, ``seconds`` after T0."""

    dlat = math.degrees(distance_m / EARTH_RADIUS_M)
    return HistoryPoint(
        lat=stop.location.lat + dlat,
        lon=stop.location.lon,
        timestamp=T0 + timedelta(seconds=seconds),
    )


def test_dwell_inside_tight_radius_marks_stopped() -> None:
    history = [_at(20, 0), _at(30, 12), _at(25, 20)]

    result = detect_passages(history, [STOP], tz=timezone.utc)

    passage = result["S1"]
    assert passage.stopped is True
    assert passage.dwell_s == 20
    assert passage.dwell_duration == "20s"
    assert passage.arrival_time == "08:05"
    assert passage.arrived_at == T0


def test_single_fix_in_wide_radius_is_a_pass() -> None:
    result = detect_passages([_at(60, 0)], [STOP], tz=timezone.utc)

    passage = result["S1"]
    assert passage.stopped is False
    assert passage.dwell_s is None
    assert passage.dwell_duration is None


def test_fixes_outside_detection_radius_are_absent() -> None:
    assert detect_passages([_at(150, 0), _at(300, 30)], [STOP]) == {}


def test_minimum_dwell_is_inclusive() -> None:
    exactly = detect_passages([_at(10, 0), _at(10, 10)], [STOP], tz=timezone.utc)
    short = detect_passages([_at(10, 0), _at(10, 9)], [STOP], tz=timezone.utc)

    assert exactly["S1"].stopped is True
    assert exactly["S1"].dwell_duration == "10s"
    assert short["S1"].stopped is False


def test_long_span_in_wide_radius_only_is_not_a_dwell() -> None:
    history = [_at(80, 0), _at(20, 5), _at(70, 60), _at(90, 120)]

    passage = detect_passages(history, [STOP], tz=timezone.utc)["S1"]

    assert passage.stopped is False


def test_minute_dwell_formatting() -> None:
    passage = detect_passages([_at(5, 0), _at(5, 75)], [STOP], tz=timezone.utc)["S1"]

    assert passage.dwell_s == 75
    assert passage.dwell_duration == "1m 15s"


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0s"), (10, "10s"), (59, "59s"), (60, "1m 0s"), (135, "2m 15s")],
)
def test_format_dwell(seconds: int, expected: str) -> None:
    assert format_dwell(seconds) == expected


def test_arrival_is_earliest_fix_regardless_of_input_order() -> None:
    history = [_at(10, 300), _at(90, 0), _at(40, 120)]

    passage = detect_passages(history, [STOP], tz=timezone.utc)["S1"]

    assert passage.arrived_at == T0
    assert passage.arrival_time == "08:05"


def test_arrival_rendered_in_requested_timezone() -> None:
    cet = timezone(timedelta(hours=1))
    passage = detect_passages([_at(10, 0)], [STOP], tz=cet)["S1"]
    assert passage.arrival_time == "09:05"


def test_empty_inputs_give_empty_result() -> None:
    assert detect_passages([], [STOP]) == {}
    assert detect_passages([_at(10, 0)], []) == {}


def test_each_stop_classified_independently() -> None:
    far = Stop(id="S2", name="Ropsten", location=GeoPoint(lat=59.01, lon=18.0))
    history = [_at(15, 0), _at(15, 30), _at(40, 90, stop=far)]

    result = detect_passages(history, [STOP, far], tz=timezone.utc)

    assert set(result) == {"S1", "S2"}
    assert result["S1"].stopped is True
    assert result["S2"].stopped is False


def test_detection_is_deterministic() -> None:
    history = [_at(20, 0), _at(30, 12), _at(25, 20)]
    assert detect_passages(history, [STOP], tz=timezone.utc) == detect_passages(
        history, [STOP], tz=timezone.utc
    )


def test_threshold_uses_unrounded_span() -> None:
    just_short = detect_passages([_at(10, 0), _at(10, 9.5)], [STOP], tz=timezone.utc)
    just_over = detect_passages([_at(10, 0), _at(10, 10.4)], [STOP], tz=timezone.utc)

    assert just_short["S1"].stopped is False
    assert just_short["S1"].dwell_duration is None
    assert just_over["S1"].stopped is True
    assert just_over["S1"].dwell_s == 10
