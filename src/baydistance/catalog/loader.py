"""
Place catalog loader.

The default catalog is the packaged list of ten Bay Area cities
(`baydistance/catalog/bay_area_cities.json`). A custom JSON file with the same shape can
be configured via `catalog.path`. We validate it into typed Pydantic models so the
ranking code can assume unique, non-empty names and in-range coordinates.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path

from pydantic import TypeAdapter

from baydistance.core.env import resolve_project_path
from baydistance.domain.models import NamedPlace


_PLACES_ADAPTER = TypeAdapter(list[NamedPlace])

DEFAULT_CATALOG = "bay_area_cities.json"


def _ensure_unique_names(places: list[NamedPlace]) -> list[NamedPlace]:
    seen: set[str] = set()
    for p in places:
        if p.name in seen:
            raise ValueError(f"Duplicate place name in catalog: {p.name!r}")
        seen.add(p.name)
    return places


def load_places(path: str | Path | None = None) -> list[NamedPlace]:
    """Load and validate a place catalog (the packaged Bay Area list when `path` is None)."""
    if path is None:
        text = resources.files("baydistance.catalog").joinpath(DEFAULT_CATALOG).read_text(encoding="utf-8")
    else:
        text = resolve_project_path(path).read_text(encoding="utf-8")
    places = _PLACES_ADAPTER.validate_python(json.loads(text))
    return _ensure_unique_names(places)


def find_place(places: list[NamedPlace], name: str | None) -> NamedPlace | None:
    """Case-insensitive lookup by name; None if `name` is empty or unknown."""
    if not name or not name.strip():
        return None
    wanted = name.strip().casefold()
    for p in places:
        if p.name.casefold() == wanted:
            return p
    return None
