from __future__ import annotations

from dataclasses import dataclass

# 5 decimals is roughly 1.1 m of latitude.
COORD_DECIMALS = 5


def round_coord(value: float | str) -> float:
    return round(float(value), COORD_DECIMALS)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")

    def rounded(self) -> "GeoPoint":
        return GeoPoint(lat=round_coord(self.lat), lon=round_coord(self.lon))

    def as_pair(self) -> list[float]:
        return [self.lat, self.lon]
