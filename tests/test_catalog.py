import json

import pytest
from pydantic import ValidationError

from baydistance.catalog.loader import find_place, load_places


def test_packaged_catalog_has_ten_bay_area_cities():
    places = load_places()
    names = [p.name for p in places]

    assert len(names) == 10
    assert len(set(names)) == 10
    assert names[0] == "Mountain View"
    assert "San Francisco" in names
    sf = find_place(places, "San Francisco")
    assert sf is not None
    assert (sf.location.lat, sf.location.lon) == (37.7749, -122.4194)


def test_find_place_is_case_insensitive():
    places = load_places()
    assert find_place(places, "  palo alto ").name == "Palo Alto"
    assert find_place(places, "Atlantis") is None
    assert find_place(places, "") is None
    assert find_place(places, None) is None


def test_load_places_from_custom_path(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(
        json.dumps([{"name": "Napa", "location": {"lat": 38.2975, "lon": -122.2869}}]),
        encoding="utf-8",
    )
    places = load_places(path)
    assert [p.name for p in places] == ["Napa"]


def test_load_places_rejects_duplicates(tmp_path):
    path = tmp_path / "places.json"
    row = {"name": "Napa", "location": {"lat": 38.2975, "lon": -122.2869}}
    path.write_text(json.dumps([row, row]), encoding="utf-8")
    with pytest.raises(ValueError, match="Duplicate"):
        load_places(path)


def test_load_places_rejects_out_of_range_coordinates(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(json.dumps([{"name": "Nowhere", "location": {"lat": 123, "lon": 0}}]), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_places(path)
