from __future__ import annotations

from datetime import tzinfo
from typing import Sequence

from src.domain.algorithms.geo_utils import haversine_m
from src.domain.models import HistoryPoint, Stop, StopPassage

# Tuned for roughly 5 s GPS sampling: the wide radius absorbs fix jitter,
# the tight radius plus minimum span separates real dwells from drive-bys.
DETECTION_RADIUS_M = 100.0
DWELL_RADIUS_M = 35.0
MIN_DWELL_S = 10


def format_dwell(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}m {secs}s" if minutes > 0 else f"{secs}s"


def detect_passages(
    history: Sequence[HistoryPoint],
    stops: Sequence[Stop],
    *,
    tz: tzinfo | None = None,
) -> dict[str, StopPassage]:
    """Classify, per stop, whether the vehicle passed it or dwelled there.

    Stops with no trajectory point inside the detection radius are absent
    from the result. Arrival time is rendered as ``HH:MM`` in ``tz`` (system
    local time when omitted).
    """

    if not history or not stops:
        return {}

    out: dict[str, StopPassage] = {}
    for stop in stops:
        slat = stop.location.lat
        slon = stop.location.lon

        nearby: list[tuple[HistoryPoint, float]] = []
        for p in history:
            d = haversine_m(p.lat, p.lon, slat, slon)
            if d <= DETECTION_RADIUS_M:
                nearby.append((p, d))
        if not nearby:
            continue

        nearby.sort(key=lambda x: x[0].timestamp)
        first = nearby[0][0]

        dwell = [p for p, d in nearby if d <= DWELL_RADIUS_M]
        stopped = False
        dwell_s: int | None = None
        if len(dwell) >= 2:
            span = (dwell[-1].timestamp - dwell[0].timestamp).total_seconds()
            # Threshold applies to the raw span; rounding is for display only.
            if span >= MIN_DWELL_S:
                stopped = True
                dwell_s = round(span)

        out[stop.id] = StopPassage(
            arrival_time=first.timestamp.astimezone(tz).strftime("%H:%M"),
            arrived_at=first.timestamp,
            stopped=stopped,
            dwell_s=dwell_s,
            dwell_duration=format_dwell(dwell_s) if dwell_s is not None else None,
        )

    return out
