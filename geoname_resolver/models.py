"""
Data objects shared by the index builder, the ranking pipeline and the API.
Pydantic models for anything parsed or serialized; a plain dataclass for the
in-flight ranking unit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Stored when a coordinate cannot be parsed; outside any valid lat/lon range
OUT_OF_BOUNDS = 999999.0
# Largest value an SQLite INTEGER column can hold
MAX_SQLITE_INTEGER = 2**63 - 1

# Gazetteer column positions (tab-separated GeoNames dump)
COL_ID = 0
COL_NAME = 1
COL_ALTERNATE_NAMES = 3
COL_LATITUDE = 4
COL_LONGITUDE = 5
COL_FEATURE_CLASS = 6
COL_FEATURE_CODE = 7
COL_COUNTRY_CODE = 8
COL_ADMIN1_CODE = 10
COL_ADMIN2_CODE = 11
COL_POPULATION = 14
MIN_COLUMNS = COL_POPULATION + 1


class MalformedRowError(ValueError):
    """A gazetteer line that cannot be turned into a record."""


# ── Gazetteer rows ────────────────────────────────────────────────────

class GazetteerRecord(BaseModel):
    """One row of the gazetteer, as stored in the index."""
    id: int
    name: str
    alternate_names: str = ""
    latitude: float = OUT_OF_BOUNDS
    longitude: float = OUT_OF_BOUNDS
    feature_class: str = ""
    feature_code: str = ""
    country_code: str = ""
    admin1_code: str = ""
    admin2_code: str = ""
    population: int = 0

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def parse_coordinate(cls, v):
        """Unparseable coordinates become OUT_OF_BOUNDS instead of failing the row."""
        try:
            value = float(v)
        except (TypeError, ValueError):
            return OUT_OF_BOUNDS
        # nan and inf parse as floats but are not coordinates
        return value if math.isfinite(value) else OUT_OF_BOUNDS

    @field_validator("population", mode="before")
    @classmethod
    def parse_population(cls, v):
        try:
            population = int(v)
        except (TypeError, ValueError):
            return 0
        return population if 0 <= population <= MAX_SQLITE_INTEGER else 0

    @classmethod
    def from_row(cls, line: str) -> "GazetteerRecord":
        tokens = line.rstrip("\r\n").split("\t")
        if len(tokens) < MIN_COLUMNS:
            raise MalformedRowError(
                f"expected at least {MIN_COLUMNS} columns, got {len(tokens)}"
            )
        return cls(
            id=tokens[COL_ID],
            name=tokens[COL_NAME],
            alternate_names=tokens[COL_ALTERNATE_NAMES],
            latitude=tokens[COL_LATITUDE],
            longitude=tokens[COL_LONGITUDE],
            feature_class=tokens[COL_FEATURE_CLASS],
            feature_code=tokens[COL_FEATURE_CODE],
            country_code=tokens[COL_COUNTRY_CODE],
            admin1_code=tokens[COL_ADMIN1_CODE],
            admin2_code=tokens[COL_ADMIN2_CODE],
            population=tokens[COL_POPULATION],
        )


# ── Ranking ───────────────────────────────────────────────────────────

@dataclass
class Candidate:
    """A retrieved gazetteer entry being scored for one query name."""
    name: str
    alternate_names: str
    country_code: str
    admin1_code: str
    admin2_code: str
    latitude: float
    longitude: float
    feature_code: str
    weight: Optional[float] = None

    def __post_init__(self):
        # An empty field would make the alternate-name term depend on data
        # gaps; treat the primary name as the only alternate instead.
        if not self.alternate_names:
            self.alternate_names = self.name

    def alternate_name_list(self) -> list[str]:
        return self.alternate_names.split(",")

    def to_location(self) -> "ResolvedLocation":
        return ResolvedLocation(
            name=self.name,
            longitude=self.longitude,
            latitude=self.latitude,
            country_code=self.country_code,
            admin1_code=self.admin1_code,
            admin2_code=self.admin2_code,
        )


# ── Output models ─────────────────────────────────────────────────────

class ResolvedLocation(BaseModel):
    """Externally exposed result record. Serialized with camelCase keys."""
    name: str
    longitude: float
    latitude: float
    country_code: str = Field("", alias="countryCode")
    admin1_code: str = Field("", alias="admin1Code")
    admin2_code: str = Field("", alias="admin2Code")

    model_config = {"populate_by_name": True}

    def to_csv(self) -> str:
        """Quoted CSV line used by the plain-text search output."""
        values = (
            self.name,
            self.longitude,
            self.latitude,
            self.country_code,
            self.admin1_code,
            self.admin2_code,
        )
        return ",".join(f'"{v}"' for v in values)


class IndexBuildStats(BaseModel):
    index_path: str
    rows_read: int = 0
    rows_indexed: int = 0
    rows_skipped: int = 0
    already_built: bool = False
    duration_seconds: float = 0.0


class HealthResponse(BaseModel):
    status: str = "ok"
    index_path: Optional[str] = None
