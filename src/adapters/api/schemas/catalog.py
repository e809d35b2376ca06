from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class StopSchema(BaseModel):
    id: str
    name: str
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    agency: str | None = None


class LineSchema(BaseModel):
    id: str
    short_name: str
    agency: str
    path: list[tuple[float, float]]
    stops: list[StopSchema]


class ManifestEntrySchema(BaseModel):
    id: str
    short_name: str
    from_name: str
    to_name: str
    agency: str


class SearchHitSchema(BaseModel):
    type: Literal["line", "stop"]
    id: str
    title: str
    subtitle: str
    agency: str
