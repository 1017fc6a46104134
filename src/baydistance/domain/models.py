"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- catalog entities (`NamedPlace`)
- derived distance annotations (`DistanceEstimate`, `RankedEntry`, `CityBoard`)
- presentation state passed into the stateless core (`ViewState`)
- recommendation / parking outputs (`RecommendationResult`, `ParkingResult`)

Keeping these models in one place helps:
- validation (reject bad inputs early),
- typed refactors,
- consistent JSON output across CLI/API/Web.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SortKey = Literal["alphabet", "distance", "time"]

_SORT_KEY_ALIASES = {"alphabetical": "alphabet", "name": "alphabet"}


def normalize_sort_key(value: str) -> str:
    """Map user-facing sort key spellings onto a `SortKey` value."""
    key = str(value).strip().lower()
    return _SORT_KEY_ALIASES.get(key, key)


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class NamedPlace(BaseModel):
    """A labeled destination with a fixed location (one of the catalog cities)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    location: GeoPoint

    @field_validator("name")
    @classmethod
    def _strip_name(cls, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValueError("place name must not be blank")
        return name


class DistanceEstimate(BaseModel):
    """Distance and driving-time estimate from the reference point to one place."""

    model_config = ConfigDict(frozen=True)

    miles: float = Field(..., ge=0)
    minutes: int = Field(..., ge=0)
    label: str


class RankedEntry(BaseModel):
    """One display row; `estimate` is None when the reference location is unknown."""

    place: NamedPlace
    estimate: DistanceEstimate | None = None


class ViewState(BaseModel):
    """Session-scoped UI state owned by the presentation layer."""

    sort_key: SortKey = "alphabet"
    selected_city: str | None = None
    selected_recommendations: list[str] = Field(default_factory=list)

    @field_validator("sort_key", mode="before")
    @classmethod
    def _normalize_sort_key(cls, value: object) -> object:
        return normalize_sort_key(value) if isinstance(value, str) else value


class DetectedLocation(BaseModel):
    """Result of IP-based location detection."""

    label: str
    point: GeoPoint
    city: str | None = None
    region: str | None = None
    country: str | None = None


class CityBoard(BaseModel):
    """Everything the UI needs to render the city list for one reference point."""

    location_label: str
    reference: GeoPoint | None = None
    sort_key: SortKey
    entries: list[RankedEntry]
    selected: RankedEntry | None = None


class PointOfInterest(BaseModel):
    """One LLM-suggested place to visit."""

    name: str = Field(..., min_length=1)
    description: str = ""
    category: str | None = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ParkingOption(BaseModel):
    """One nearby parking facility, with its distance from the city center."""

    name: str = Field(..., min_length=1)
    address: str | None = None
    location: GeoPoint
    distance_miles: float = Field(..., ge=0)
    rating: float | None = Field(default=None, ge=0, le=5)
    open_now: bool | None = None


class RecommendationResult(BaseModel):
    """Points of interest for a city, and whether they came from the model or a fallback."""

    city: str
    status: Literal["parsed", "fallback"]
    items: list[PointOfInterest]
    reason: str | None = None


class ParkingResult(BaseModel):
    """Parking options near a city center, and whether the lookup succeeded."""

    city: str
    status: Literal["parsed", "fallback"]
    items: list[ParkingOption]
    reason: str | None = None
