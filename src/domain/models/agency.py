from __future__ import annotations

from enum import Enum
from typing import Mapping


class Agency(str, Enum):
    SL = "SL"
    WAAB = "WAAB"


class VehicleKind(str, Enum):
    BUS = "bus"
    FERRY = "ferry"


# Raw agency_id (routes.txt) -> logical operator tag. Unlisted ids are dropped.
DEFAULT_AGENCY_TABLE: Mapping[str, Agency] = {
    "505000000000000001": Agency.SL,
    "500000000000000114": Agency.WAAB,  # Waxholmsbolaget
    "505000000000000606": Agency.WAAB,
}

OPERATOR_LABELS: Mapping[Agency, str] = {
    Agency.SL: "SL",
    Agency.WAAB: "Blidösundsbolaget",
}

VEHICLE_KINDS: Mapping[Agency, VehicleKind] = {
    Agency.SL: VehicleKind.BUS,
    Agency.WAAB: VehicleKind.FERRY,
}

# Company code embedded in vehicle ids: <code:3><number:4>.
CONTRACTOR_CODES: Mapping[str, str] = {
    "050": "Blidösundsbolaget",
    "070": "AB Stockholms Spårvägar",
    "705": "AB Stockholms Spårvägar",
    "706": "AB Stockholms Spårvägar",
    "707": "AB Stockholms Spårvägar",
    "709": "AB Stockholms Spårvägar",
    "100": "Keolis",
    "150": "VR Sverige",
    "251": "Connecting Stockholm",
    "300": "Nobina",
    "450": "Transdev",
    "456": "Transdev",
    "459": "Transdev",
    "650": "SJ Stockholmståg",
    "750": "Djurgårdens färjetrafik",
    "800": "Ballerina",
}


def classify_agency(
    raw_agency_id: str, table: Mapping[str, Agency] | None = None
) -> Agency | None:
    lookup = DEFAULT_AGENCY_TABLE if table is None else table
    return lookup.get((raw_agency_id or "").strip())
