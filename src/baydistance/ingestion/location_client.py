"""
Location ingestion client (ipinfo.io).

Detects the visitor's approximate location from their public IP. The response carries
`loc` as a `"lat,lng"` string plus city/region/country names, which we turn into a
display label and a validated `GeoPoint`.

Detection is best-effort: any failure is logged and reported as `None` so the UI can
still render the city list without distances.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from baydistance.config.settings import Settings
from baydistance.core.http import get_json
from baydistance.domain.models import DetectedLocation, GeoPoint

logger = logging.getLogger(__name__)


def format_location_label(city: str | None, region: str | None, country: str | None) -> str:
    """Render `"City, Region, Country"`, dropping the parts ipinfo did not return."""
    if city and region:
        return f"{city}, {region}, {country}"
    if city:
        return f"{city}, {country}"
    return country or ""


def parse_loc(loc: str) -> GeoPoint:
    """Parse ipinfo's `"lat,lng"` string.

    Raises:
        ValueError: If the string is malformed or the coordinates are out of range.
    """
    parts = [p.strip() for p in str(loc).split(",")]
    if len(parts) != 2:
        raise ValueError(f"Invalid loc {loc!r}; expected 'lat,lng'")
    return GeoPoint(lat=float(parts[0]), lon=float(parts[1]))


class IpLocationClient:
    """Looks up the caller's location via ipinfo.io."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _fetch(self) -> dict[str, Any]:
        cfg = self._settings.ingestion.location
        params = {"token": cfg.token} if cfg.token else None
        payload = get_json(
            cfg.base_url,
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        if not isinstance(payload, dict):
            raise ValueError("ipinfo response is not a JSON object")
        return payload

    def detect(self) -> DetectedLocation | None:
        """Return the detected location, or None when it cannot be determined."""
        try:
            payload = self._fetch()
            point = parse_loc(payload["loc"])
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.warning("Location detection failed: %s", exc)
            return None

        city = payload.get("city") or None
        region = payload.get("region") or None
        country = payload.get("country") or None
        label = format_location_label(city, region, country) or f"{point.lat:.4f}, {point.lon:.4f}"
        logger.info("Detected location %s (%.4f, %.4f)", label, point.lat, point.lon)
        return DetectedLocation(label=label, point=point, city=city, region=region, country=country)
