from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, floor, isfinite, radians, sin, sqrt

"""
Geospatial helpers.

Great-circle distance (haversine) and a coarse linear driving-time estimate. Both are
pure functions; callers own any state (reference location, sort mode, selections).
"""

EARTH_RADIUS_MILES = 3959.0
DEFAULT_AVG_SPEED_MPH = 30.0


class InvalidCoordinateError(ValueError):
    """Raised when a latitude/longitude is outside the valid range."""


class InvalidSpeedError(ZeroDivisionError):
    """Raised when a driving-time estimate is asked for with a non-positive speed."""


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class DrivingTime:
    minutes: int
    label: str


def validate_point(point: GeoPoint) -> GeoPoint:
    """Return `point` unchanged, or raise `InvalidCoordinateError`."""
    lat, lon = point.lat, point.lon
    if not (isfinite(lat) and -90 <= lat <= 90):
        raise InvalidCoordinateError(f"latitude {lat!r} is outside [-90, 90]")
    if not (isfinite(lon) and -180 <= lon <= 180):
        raise InvalidCoordinateError(f"longitude {lon!r} is outside [-180, 180]")
    return point


def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in miles between two points.

    Raises:
        InvalidCoordinateError: If either point is out of range.
    """
    validate_point(a)
    validate_point(b)

    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = radians(b.lat - a.lat)
    dlon = radians(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points.
    h = min(max(h, 0.0), 1.0)
    return 2 * EARTH_RADIUS_MILES * atan2(sqrt(h), sqrt(1 - h))


def format_minutes(minutes: int) -> str:
    """Render minutes as `"42 min"`, `"1h 35m"` or `"3h"`."""
    if minutes < 60:
        return f"{minutes} min"
    hours, remainder = divmod(minutes, 60)
    return f"{hours}h {remainder}m" if remainder > 0 else f"{hours}h"


def driving_time(miles: float, avg_speed_mph: float = DEFAULT_AVG_SPEED_MPH) -> DrivingTime:
    """Estimate driving time for `miles` at a constant average speed.

    Minutes are rounded half-up, so 47.5 minutes becomes 48 (not banker's rounding).

    Raises:
        InvalidSpeedError: If `avg_speed_mph` is not positive.
        ValueError: If `miles` is negative or not finite.
    """
    if avg_speed_mph <= 0:
        raise InvalidSpeedError(f"avg_speed_mph must be > 0, got {avg_speed_mph!r}")
    if not (isfinite(miles) and miles >= 0):
        raise ValueError(f"miles must be a finite non-negative number, got {miles!r}")

    raw_minutes = miles / avg_speed_mph * 60
    if not isfinite(raw_minutes):
        raise ValueError(f"driving time for {miles!r} miles at {avg_speed_mph!r} mph is not finite")
    minutes = int(floor(raw_minutes + 0.5))
    return DrivingTime(minutes=minutes, label=format_minutes(minutes))
