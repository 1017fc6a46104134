"""
Places ingestion client (Google Places Nearby Search).

Used to look up parking facilities around a city center. Returns the raw `results`
list; validation and distance annotation happen in `baydistance.recommender.parsing`.
"""

from __future__ import annotations

import logging
from typing import Any

from baydistance.config.settings import Settings
from baydistance.core.http import get_json
from baydistance.domain.models import GeoPoint

logger = logging.getLogger(__name__)


class PlacesClient:
    def __init__(self, settings: Settings):
        self._settings = settings

    def nearby_parking(self, point: GeoPoint) -> list[dict[str, Any]]:
        """Return raw Nearby Search results around `point`.

        Raises:
            RuntimeError: If no API key is configured or the API reports an error status.
            httpx.HTTPError: On transport errors or non-2xx status codes.
        """
        cfg = self._settings.ingestion.places
        if not cfg.api_key:
            raise RuntimeError("Places API key is not configured (set GOOGLE_MAPS_API_KEY).")

        params = {
            "location": f"{point.lat},{point.lon}",
            "radius": cfg.radius_m,
            "type": cfg.place_type,
            "key": cfg.api_key,
        }
        logger.info("Searching %s within %dm of %.4f,%.4f", cfg.place_type, cfg.radius_m, point.lat, point.lon)
        data = get_json(cfg.base_url, params=params, timeout_seconds=self._settings.app.http_timeout_seconds)

        status = str((data or {}).get("status", ""))
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            message = (data or {}).get("error_message") or "no error message"
            raise RuntimeError(f"Places API returned status {status or 'UNKNOWN'}: {message}")

        results = data.get("results") or []
        return [r for r in results if isinstance(r, dict)]
