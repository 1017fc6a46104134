"""
Parsers for upstream free-form payloads.

LLM output is free text that is *supposed* to be JSON; Places results are JSON with an
inconsistent shape. Both are parsed into typed models against a strict schema. Every
parser returns a tagged result:

- `Parsed(data)`: at least one valid item was recovered.
- `Fallback(reason, data)`: nothing usable; `data` holds placeholder items (possibly empty).

Invalid individual items are dropped, not fatal.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import ValidationError

from baydistance.core.geo import GeoPoint as CoreGeoPoint, distance_miles
from baydistance.domain.models import GeoPoint, ParkingOption, PointOfInterest

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*$", re.MULTILINE)


@dataclass(frozen=True)
class Parsed(Generic[T]):
    data: T


@dataclass(frozen=True)
class Fallback(Generic[T]):
    reason: str
    data: T


ParseResult = Union[Parsed[T], Fallback[T]]


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence lines (```json ... ```) around model output."""
    return _FENCE_RE.sub("", text).strip()


def _extract_json(text: str) -> Any:
    """Decode the first JSON array or object found in `text`.

    Raises:
        ValueError: If no JSON value can be decoded.
    """
    cleaned = strip_code_fences(text)
    decoder = json.JSONDecoder()
    for i, ch in enumerate(cleaned):
        if ch not in "[{":
            continue
        try:
            value, _ = decoder.raw_decode(cleaned, i)
        except json.JSONDecodeError:
            continue
        return value
    raise ValueError("no JSON value found in model output")


def placeholder_recommendations(city: str) -> list[PointOfInterest]:
    """Generic suggestions shown when the model output cannot be used."""
    return [
        PointOfInterest(
            name=f"Downtown {city}",
            description=f"Walk around central {city} for local shops and restaurants.",
            category="neighborhood",
        ),
        PointOfInterest(
            name=f"{city} parks",
            description="Check the city's parks and trails for an outdoor break.",
            category="outdoors",
        ),
        PointOfInterest(
            name=f"{city} visitor center",
            description="Ask the visitor center about current events and exhibits.",
            category="information",
        ),
    ]


def parse_recommendations(text: str | None, *, city: str, limit: int = 5) -> ParseResult[list[PointOfInterest]]:
    """Parse model output into at most `limit` points of interest.

    Accepts a JSON array of objects, or an object with a `recommendations` array. Plain
    strings in the array are accepted as names.
    """
    if not text or not text.strip():
        return Fallback("empty model output", placeholder_recommendations(city))

    try:
        payload = _extract_json(text)
    except ValueError as exc:
        logger.warning("Unparseable recommendations for %s: %s", city, exc)
        return Fallback(str(exc), placeholder_recommendations(city))

    if isinstance(payload, dict):
        payload = payload.get("recommendations", payload.get("places"))
    if not isinstance(payload, list):
        return Fallback("model output is not a list of recommendations", placeholder_recommendations(city))

    items: list[PointOfInterest] = []
    for raw in payload:
        if isinstance(raw, str):
            raw = {"name": raw}
        if not isinstance(raw, dict):
            continue
        try:
            items.append(PointOfInterest.model_validate(raw))
        except ValidationError:
            logger.debug("Dropping invalid recommendation item: %r", raw)
            continue
        if len(items) >= limit:
            break

    if not items:
        return Fallback("no valid recommendations in model output", placeholder_recommendations(city))
    return Parsed(items)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _rating(value: Any) -> float | None:
    # Out-of-range or non-numeric ratings are dropped; the lot itself is kept.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if 0 <= value <= 5 else None


def _parking_option(raw: Any, origin: CoreGeoPoint) -> ParkingOption | None:
    if not isinstance(raw, dict):
        return None
    loc = _mapping(_mapping(raw.get("geometry")).get("location"))
    try:
        point = GeoPoint(lat=loc["lat"], lon=loc["lng"])
        miles = distance_miles(origin, CoreGeoPoint(lat=point.lat, lon=point.lon))
        return ParkingOption(
            name=raw.get("name") or "",
            address=raw.get("vicinity") or raw.get("formatted_address"),
            location=point,
            distance_miles=miles,
            rating=_rating(raw.get("rating")),
            open_now=_mapping(raw.get("opening_hours")).get("open_now"),
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_parking(
    results: list[dict[str, Any]], *, origin: GeoPoint, limit: int = 5
) -> ParseResult[list[ParkingOption]]:
    """Validate Places results into parking options, nearest first."""
    core_origin = CoreGeoPoint(lat=origin.lat, lon=origin.lon)
    options = [opt for opt in (_parking_option(r, core_origin) for r in results) if opt is not None]
    if not options:
        reason = "no parking results" if not results else "no valid parking results"
        return Fallback(reason, [])
    options.sort(key=lambda o: o.distance_miles)
    return Parsed(options[:limit])
