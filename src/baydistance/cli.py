"""
BayDistance CLI entrypoint.

This CLI is intended for quick local demos and debugging without the web UI.
Distance/ranking logic lives in `baydistance.ranking`; recommendation and parking
lookups live in `baydistance.recommender`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from baydistance.catalog.loader import find_place, load_places
from baydistance.config.overrides import apply_settings_overrides
from baydistance.config.settings import Settings, get_settings
from baydistance.core.logging import configure_logging
from baydistance.domain.models import GeoPoint, NamedPlace, ViewState
from baydistance.ingestion.llm_client import LlmClient
from baydistance.ingestion.location_client import IpLocationClient
from baydistance.ingestion.places_client import PlacesClient
from baydistance.ranking.board import build_board
from baydistance.recommender.recommend import find_parking, recommend_places


def _require_place(settings: Settings, name: str) -> NamedPlace:
    place = find_place(load_places(settings.catalog.path), name)
    if place is None:
        raise ValueError(f"Unknown city '{name}'")
    return place


def _cmd_cities(args: argparse.Namespace) -> int:
    """Handle the `cities` subcommand."""
    settings = get_settings()
    if args.avg_speed is not None:
        settings = apply_settings_overrides(settings, {"estimation": {"avg_speed_mph": args.avg_speed}})

    label: str | None = None
    if args.lat is not None and args.lon is not None:
        reference: GeoPoint | None = GeoPoint(lat=float(args.lat), lon=float(args.lon))
    elif args.lat is not None or args.lon is not None:
        raise ValueError("--lat and --lon must be given together")
    else:
        detected = IpLocationClient(settings).detect()
        reference = detected.point if detected else None
        label = detected.label if detected else None

    state = ViewState(sort_key=args.sort or settings.ranking.default_sort, selected_city=args.select)
    board = build_board(load_places(settings.catalog.path), reference, state, settings=settings, location_label=label)

    if args.json:
        print(json.dumps(board.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Your location: {board.location_label}")
    if board.selected is not None:
        sel = board.selected
        print(f"Distance to {sel.place.name}:")
        if sel.estimate is not None:
            print(f"  Distance: {sel.estimate.miles:.1f} miles")
            print(f"  Estimated driving time: {sel.estimate.label}")
        else:
            print("  Distance unavailable")
    print(f"All Bay Area cities (sorted by {board.sort_key}):")
    for entry in board.entries:
        if entry.estimate is None:
            print(f"  {entry.place.name}")
        else:
            print(f"  {entry.place.name:<15} {entry.estimate.miles:>6.1f} miles  {entry.estimate.label}")
    return 0


def _cmd_recommend(args: argparse.Namespace) -> int:
    settings = get_settings()
    place = _require_place(settings, args.city)
    result = recommend_places(place, settings=settings, llm_client=LlmClient(settings))

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Points of interest in {result.city}:")
    if result.status == "fallback":
        print(f"  (showing generic suggestions: {result.reason})")
    for i, item in enumerate(result.items, start=1):
        category = f" [{item.category}]" if item.category else ""
        print(f"{i:>2}. {item.name}{category}")
        if item.description:
            print(f"    {item.description}")
    return 0


def _cmd_parking(args: argparse.Namespace) -> int:
    settings = get_settings()
    place = _require_place(settings, args.city)
    result = find_parking(place, settings=settings, places_client=PlacesClient(settings))

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Parking near {result.city}:")
    if not result.items:
        print(f"  No parking options found ({result.reason}).")
    for i, item in enumerate(result.items, start=1):
        address = f" - {item.address}" if item.address else ""
        print(f"{i:>2}. {item.name}{address} ({item.distance_miles:.1f} mi)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the BayDistance CLI."""
    parser = argparse.ArgumentParser(prog="baydistance")
    sub = parser.add_subparsers(dest="command", required=True)

    cities = sub.add_parser("cities", help="Distances and driving times to the Bay Area cities.")
    cities.add_argument("--lat", type=float, default=None, help="Reference latitude (default: detect by IP)")
    cities.add_argument("--lon", type=float, default=None, help="Reference longitude (default: detect by IP)")
    cities.add_argument(
        "--sort",
        type=str,
        default=None,
        choices=["alphabet", "alphabetical", "distance", "time"],
    )
    cities.add_argument("--select", type=str, default=None, help="Show details for one city")
    cities.add_argument("--avg-speed", type=float, default=None, help="Average driving speed in mph")
    cities.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    cities.set_defaults(func=_cmd_cities)

    rec = sub.add_parser("recommend", help="AI-generated points of interest for a city.")
    rec.add_argument("--city", required=True, type=str)
    rec.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rec.set_defaults(func=_cmd_recommend)

    park = sub.add_parser("parking", help="Parking options near a city center.")
    park.add_argument("--city", required=True, type=str)
    park.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    park.set_defaults(func=_cmd_parking)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m baydistance.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (ValueError, ZeroDivisionError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
