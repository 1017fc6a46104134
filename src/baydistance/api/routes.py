"""
API routes.

Endpoints:
- GET  `/api/location`: IP-detected location of the caller.
- GET  `/api/places`: the configured place catalog.
- GET  `/api/board`: distances/times to every place, sorted, with an optional selection.
- POST `/api/recommendations`: LLM points of interest for one city.
- POST `/api/parking`: parking options near one city.
- GET  `/api/settings`: public settings for the web UI (secrets redacted).
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from baydistance.catalog.loader import find_place, load_places
from baydistance.config.overrides import apply_settings_overrides
from baydistance.config.settings import get_settings
from baydistance.domain.models import (
    CityBoard,
    DetectedLocation,
    GeoPoint,
    NamedPlace,
    ParkingResult,
    RecommendationResult,
    ViewState,
)
from baydistance.ingestion.llm_client import LlmClient
from baydistance.ingestion.location_client import IpLocationClient
from baydistance.ingestion.places_client import PlacesClient
from baydistance.ranking.board import build_board
from baydistance.recommender.recommend import find_parking, recommend_places

router = APIRouter()


class CityRequest(BaseModel):
    city: str = Field(..., min_length=1)


@lru_cache
def _places() -> list[NamedPlace]:
    return load_places(get_settings().catalog.path)


@lru_cache
def _clients() -> tuple[IpLocationClient, LlmClient, PlacesClient]:
    settings = get_settings()
    return IpLocationClient(settings), LlmClient(settings), PlacesClient(settings)


def _validation_error(e: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)})


def _require_place(name: str) -> NamedPlace:
    place = find_place(_places(), name)
    if place is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "NOT_FOUND", "message": f"Unknown city '{name}'"},
        )
    return place


@router.get("/api/location")
def get_location() -> dict:
    """Detect the caller's location (best-effort)."""
    location_client, _, _ = _clients()
    detected = location_client.detect()
    if detected is None:
        return {"detected": False, "location": None}
    return {"detected": True, "location": detected.model_dump(mode="json")}


@router.get("/api/places", response_model=list[NamedPlace])
def get_places() -> list[NamedPlace]:
    return _places()


@router.get("/api/board", response_model=CityBoard)
def get_board(
    lat: float | None = None,
    lon: float | None = None,
    sort: str | None = None,
    selected: str | None = None,
    avg_speed_mph: float | None = None,
) -> CityBoard:
    """Rank all places from a reference point (detected by IP when lat/lon are absent)."""
    try:
        settings = get_settings()
        if avg_speed_mph is not None:
            settings = apply_settings_overrides(settings, {"estimation": {"avg_speed_mph": avg_speed_mph}})
        state = ViewState(sort_key=sort or settings.ranking.default_sort, selected_city=selected)

        detected: DetectedLocation | None = None
        if lat is not None and lon is not None:
            reference: GeoPoint | None = GeoPoint(lat=lat, lon=lon)
        elif lat is not None or lon is not None:
            raise ValueError("lat and lon must be given together")
        else:
            location_client, _, _ = _clients()
            detected = location_client.detect()
            reference = detected.point if detected else None

        return build_board(
            _places(),
            reference,
            state,
            settings=settings,
            location_label=detected.label if detected else None,
        )
    except ValueError as e:
        raise _validation_error(e) from e


@router.post("/api/recommendations", response_model=RecommendationResult)
def post_recommendations(request: CityRequest) -> RecommendationResult:
    """Points of interest for a city (falls back to generic suggestions on failure)."""
    place = _require_place(request.city)
    _, llm_client, _ = _clients()
    return recommend_places(place, settings=get_settings(), llm_client=llm_client)


@router.post("/api/parking", response_model=ParkingResult)
def post_parking(request: CityRequest) -> ParkingResult:
    """Parking options near a city center (empty fallback on failure)."""
    place = _require_place(request.city)
    _, _, places_client = _clients()
    return find_parking(place, settings=get_settings(), places_client=places_client)


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for UI defaults (credentials removed)."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name},
        "estimation": settings.estimation.model_dump(mode="json"),
        "ranking": settings.ranking.model_dump(mode="json"),
        "features": {
            "recommendations": bool(settings.ingestion.llm.api_key),
            "parking": bool(settings.ingestion.places.api_key),
        },
    }
