from __future__ import annotations

# Orchestration for the two "what to do there" features of a selected city:
# - points of interest from the LLM
# - nearby parking from the Places API
#
# Both fail open: upstream errors are logged and turned into a `fallback` result so the
# UI always has something to render.

import logging
from typing import Protocol

import httpx

from baydistance.config.settings import Settings
from baydistance.domain.models import (
    GeoPoint,
    NamedPlace,
    ParkingResult,
    RecommendationResult,
)
from baydistance.recommender.parsing import Fallback, parse_parking, parse_recommendations

logger = logging.getLogger(__name__)

RECOMMENDATION_PROMPT = """Suggest {count} points of interest to visit in {city}, California.
Return ONLY a JSON array. Each element must be an object with keys:
"name" (string), "description" (one sentence), "category" (string, e.g. "museum", "park", "food").
"""


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> str: ...


class ParkingSearchClient(Protocol):
    def nearby_parking(self, point: GeoPoint) -> list[dict]: ...


def build_recommendation_prompt(city: str, count: int) -> str:
    return RECOMMENDATION_PROMPT.format(city=city, count=count)


def recommend_places(
    place: NamedPlace, *, settings: Settings, llm_client: CompletionClient
) -> RecommendationResult:
    """Ask the LLM for points of interest in `place` and parse the answer."""
    limit = settings.ingestion.llm.max_recommendations
    try:
        text = llm_client.complete(build_recommendation_prompt(place.name, limit))
    except (httpx.HTTPError, RuntimeError, ValueError) as exc:
        logger.warning("Recommendation request for %s failed: %s", place.name, exc)
        result = parse_recommendations(None, city=place.name, limit=limit)
        return RecommendationResult(city=place.name, status="fallback", items=result.data, reason=str(exc))

    result = parse_recommendations(text, city=place.name, limit=limit)
    if isinstance(result, Fallback):
        return RecommendationResult(city=place.name, status="fallback", items=result.data, reason=result.reason)
    return RecommendationResult(city=place.name, status="parsed", items=result.data)


def find_parking(
    place: NamedPlace, *, settings: Settings, places_client: ParkingSearchClient
) -> ParkingResult:
    """Look up parking options around the center of `place`."""
    limit = settings.ingestion.places.max_results
    try:
        raw = places_client.nearby_parking(place.location)
    except (httpx.HTTPError, RuntimeError, ValueError) as exc:
        logger.warning("Parking lookup for %s failed: %s", place.name, exc)
        return ParkingResult(city=place.name, status="fallback", items=[], reason=str(exc))

    result = parse_parking(raw, origin=place.location, limit=limit)
    if isinstance(result, Fallback):
        return ParkingResult(city=place.name, status="fallback", items=result.data, reason=result.reason)
    return ParkingResult(city=place.name, status="parsed", items=result.data)
