from baydistance.catalog.loader import load_places
from baydistance.config.settings import get_settings
from baydistance.domain.models import GeoPoint, ViewState
from baydistance.ranking.board import UNKNOWN_LOCATION_LABEL, build_board

PALO_ALTO = GeoPoint(lat=37.4419, lon=-122.1430)


def test_board_sorted_by_distance_with_selection():
    settings = get_settings()
    board = build_board(
        load_places(),
        PALO_ALTO,
        ViewState(sort_key="distance", selected_city="san francisco"),
        settings=settings,
        location_label="Palo Alto, California, US",
    )

    assert board.location_label == "Palo Alto, California, US"
    assert board.entries[0].place.name == "Palo Alto"
    miles = [e.estimate.miles for e in board.entries]
    assert miles == sorted(miles)
    assert board.selected is not None
    assert board.selected.place.name == "San Francisco"
    assert board.selected.estimate.label.endswith("min")


def test_board_without_reference_has_no_estimates():
    settings = get_settings()
    board = build_board(load_places(), None, ViewState(sort_key="time"), settings=settings)

    assert board.location_label == UNKNOWN_LOCATION_LABEL
    assert all(e.estimate is None for e in board.entries)
    # Every key is 0, so the catalog order is kept.
    assert [e.place.name for e in board.entries] == [p.name for p in load_places()]
    assert board.selected is None


def test_board_uses_configured_speed():
    settings = get_settings()
    fast = settings.model_copy(
        update={"estimation": settings.estimation.model_copy(update={"avg_speed_mph": 60})}
    )
    slow_board = build_board(load_places(), PALO_ALTO, ViewState(), settings=settings)
    fast_board = build_board(load_places(), PALO_ALTO, ViewState(), settings=fast)

    slow = {e.place.name: e.estimate.minutes for e in slow_board.entries}
    quick = {e.place.name: e.estimate.minutes for e in fast_board.entries}
    assert quick["San Francisco"] < slow["San Francisco"]


def test_view_state_accepts_alphabetical_alias():
    assert ViewState(sort_key="alphabetical").sort_key == "alphabet"
