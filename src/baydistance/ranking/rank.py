from __future__ import annotations

"""
City ranking.

`annotate` turns a reference point into per-city distance/time estimates; `rank` orders
the catalog by name, distance or time. Both are read-only transforms: the input
sequences are never mutated and a new list is returned.
"""

from typing import Callable, Mapping, Sequence

from baydistance.core.geo import DEFAULT_AVG_SPEED_MPH, GeoPoint as CoreGeoPoint
from baydistance.core.geo import distance_miles, driving_time
from baydistance.domain.models import DistanceEstimate, GeoPoint, NamedPlace, RankedEntry, normalize_sort_key

SORT_KEYS = ("alphabet", "distance", "time")


def _core_point(point: GeoPoint | CoreGeoPoint) -> CoreGeoPoint:
    return CoreGeoPoint(lat=point.lat, lon=point.lon)


def estimate_between(
    reference: GeoPoint | CoreGeoPoint,
    destination: GeoPoint | CoreGeoPoint,
    *,
    avg_speed_mph: float = DEFAULT_AVG_SPEED_MPH,
) -> DistanceEstimate:
    """Distance and driving time from `reference` to `destination`."""
    miles = distance_miles(_core_point(reference), _core_point(destination))
    time = driving_time(miles, avg_speed_mph)
    return DistanceEstimate(miles=miles, minutes=time.minutes, label=time.label)


def annotate(
    places: Sequence[NamedPlace],
    reference: GeoPoint | CoreGeoPoint,
    *,
    avg_speed_mph: float = DEFAULT_AVG_SPEED_MPH,
) -> dict[str, DistanceEstimate]:
    """Compute one `DistanceEstimate` per place, keyed by place name.

    Raises:
        ValueError: If two places share a name.
        InvalidCoordinateError: If the reference point is out of range.
        InvalidSpeedError: If `avg_speed_mph` is not positive.
    """
    estimates: dict[str, DistanceEstimate] = {}
    for place in places:
        if place.name in estimates:
            raise ValueError(f"Duplicate place name: {place.name!r}")
        estimates[place.name] = estimate_between(reference, place.location, avg_speed_mph=avg_speed_mph)
    return estimates


def _metric_key(
    estimates: Mapping[str, DistanceEstimate],
    metric: Callable[[DistanceEstimate], float],
    *,
    missing_last: bool,
) -> Callable[[NamedPlace], tuple[int, float]]:
    def key(place: NamedPlace) -> tuple[int, float]:
        est = estimates.get(place.name)
        if est is None:
            # Legacy display treats a missing estimate as 0.
            return (1, 0.0) if missing_last else (0, 0.0)
        return (0, float(metric(est)))

    return key


def rank(
    places: Sequence[NamedPlace],
    estimates: Mapping[str, DistanceEstimate],
    key: str,
    *,
    missing_last: bool = False,
) -> list[NamedPlace]:
    """Return `places` ordered by `key` (`alphabet`, `distance` or `time`).

    The sort is stable, so numeric ties keep their input order. With `missing_last`,
    places that have no estimate go after every estimated place instead of sorting
    as 0 miles / 0 minutes.

    Raises:
        ValueError: If `key` is not a known sort key.
    """
    sort_key = normalize_sort_key(key)
    if sort_key == "alphabet":
        return sorted(places, key=lambda p: p.name)
    if sort_key == "distance":
        return sorted(places, key=_metric_key(estimates, lambda e: e.miles, missing_last=missing_last))
    if sort_key == "time":
        return sorted(places, key=_metric_key(estimates, lambda e: e.minutes, missing_last=missing_last))
    raise ValueError(f"Unknown sort key {key!r}; expected one of {', '.join(SORT_KEYS)}")


def ranked_entries(
    places: Sequence[NamedPlace],
    estimates: Mapping[str, DistanceEstimate],
    key: str,
    *,
    missing_last: bool = False,
) -> list[RankedEntry]:
    """`rank` joined with the estimates, ready for display."""
    return [
        RankedEntry(place=p, estimate=estimates.get(p.name))
        for p in rank(places, estimates, key, missing_last=missing_last)
    ]
