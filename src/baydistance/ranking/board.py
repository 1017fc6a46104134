"""
City board assembly.

Joins the catalog, the (optional) reference point and the caller's `ViewState` into a
`CityBoard`. The presentation layer owns the state; this module only reads it.
"""

from __future__ import annotations

from typing import Sequence

from baydistance.catalog.loader import find_place
from baydistance.config.settings import Settings
from baydistance.domain.models import CityBoard, GeoPoint, NamedPlace, RankedEntry, ViewState
from baydistance.ranking.rank import annotate, ranked_entries

UNKNOWN_LOCATION_LABEL = "Unable to detect location"


def build_board(
    places: Sequence[NamedPlace],
    reference: GeoPoint | None,
    state: ViewState,
    *,
    settings: Settings,
    location_label: str | None = None,
) -> CityBoard:
    """Annotate and rank `places` for display.

    With no reference point every entry is returned without an estimate, ordered
    by `state.sort_key` using the missing-estimate policy from settings.
    """
    estimates = (
        annotate(places, reference, avg_speed_mph=settings.estimation.avg_speed_mph)
        if reference is not None
        else {}
    )
    entries = ranked_entries(
        places,
        estimates,
        state.sort_key,
        missing_last=settings.ranking.missing_estimates_last,
    )

    selected: RankedEntry | None = None
    chosen = find_place(list(places), state.selected_city)
    if chosen is not None:
        selected = RankedEntry(place=chosen, estimate=estimates.get(chosen.name))

    label = location_label or (
        f"{reference.lat:.4f}, {reference.lon:.4f}" if reference is not None else UNKNOWN_LOCATION_LABEL
    )
    return CityBoard(
        location_label=label,
        reference=reference,
        sort_key=state.sort_key,
        entries=entries,
        selected=selected,
    )
