#!/usr/bin/env python3
"""Run the GPX pipeline over a file and print the results.

Usage examples:

    # JSON summary of every stage to stdout
    python -m tastrails track.gpx

    # GeoJSON for the map layer, matched against a local road network
    python -m tastrails track.gpx --roads roads.geojson --geojson \
        --output-file track.geojson

    # Match through an OSRM server instead
    python -m tastrails track.gpx --osrm-url http://localhost:5000
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import OSRM_PROFILE, ROAD_SNAP_TOLERANCE_M, SIMPLIFY_TOLERANCE_DEG
from .errors import GpxProcessingError
from .gpx.export import route_to_feature
from .matching import GeometricRoadMatcher, OsrmRoadMatcher, RoadMatcher, roads_from_geojson
from .processor import GpxProcessor, ProcessedTrack
from .surfaces import RoadSurfaceClassifier, SurfaceClassifier
from .utils import json_dumps

LOGGER = logging.getLogger("tastrails")


def _setup_logging(level: str) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, level),
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tastrails",
        description="Parse, simplify, match and analyse a GPX track.",
    )
    parser.add_argument("gpx_file", help="Path to the GPX file to process")
    parser.add_argument(
        "--output-file",
        help="Write output to this path instead of stdout",
    )
    parser.add_argument(
        "--geojson",
        action="store_true",
        help="Emit a GeoJSON FeatureCollection instead of the JSON summary",
    )
    parser.add_argument(
        "--no-simplify",
        action="store_true",
        help="Match the raw track instead of the simplified one",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=SIMPLIFY_TOLERANCE_DEG,
        help="Simplification tolerance in degrees (default: %(default)s)",
    )
    network = parser.add_mutually_exclusive_group()
    network.add_argument(
        "--roads",
        help="GeoJSON road network; features need a 'name' and may carry 'surface'",
    )
    network.add_argument(
        "--osrm-url",
        help="Base URL of an OSRM-compatible map matching server",
    )
    parser.add_argument(
        "--osrm-profile",
        default=OSRM_PROFILE,
        help="OSRM routing profile (default: %(default)s)",
    )
    parser.add_argument(
        "--snap-tolerance",
        type=float,
        default=ROAD_SNAP_TOLERANCE_M,
        help="Maximum snap distance in metres for --roads (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Shorthand for --log-level DEBUG",
    )
    return parser


def build_processor(args: argparse.Namespace) -> GpxProcessor:
    """Choose matcher and classifier from the parsed CLI options."""

    matcher: Optional[RoadMatcher] = None
    classifier: Optional[SurfaceClassifier] = None
    if args.roads:
        with open(args.roads, "r", encoding="utf-8") as handle:
            roads = roads_from_geojson(json.load(handle))
        LOGGER.info("Loaded %d roads from %s", len(roads), args.roads)
        geometric = GeometricRoadMatcher(roads, snap_tolerance_m=args.snap_tolerance)
        matcher = geometric
        surfaces = geometric.surface_by_road()
        if surfaces:
            classifier = RoadSurfaceClassifier(surfaces)
    elif args.osrm_url:
        matcher = OsrmRoadMatcher(args.osrm_url, args.osrm_profile)
    return GpxProcessor(matcher, classifier, simplify_tolerance=args.tolerance)


def summarise(result: ProcessedTrack) -> Dict[str, Any]:
    stats = result.elevation.statistics
    surfaces: List[Dict[str, Any]] = [s.to_dict() for s in result.surfaces.segments]
    return {
        "name": result.track.name,
        "description": result.track.description,
        "metadata": result.track.metadata,
        "pointCount": len(result.track.points),
        "simplifiedCount": len(result.simplified),
        "matchedCount": len(result.route.points),
        "totalDistance": result.route.total_distance,
        "elevation": stats,
        "surfaces": surfaces,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the tastrails command line tool."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging("DEBUG" if args.verbose else args.log_level)

    path = Path(args.gpx_file)
    try:
        buffer = path.read_bytes()
    except OSError as exc:
        LOGGER.error("Cannot read %s: %s", path, exc)
        return 1

    try:
        processor = build_processor(args)
        result = processor.process(buffer, simplify=not args.no_simplify)
    except (GpxProcessingError, ValueError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.geojson:
        payload: Any = route_to_feature(result.route, result.surfaces)
    else:
        payload = summarise(result)
    output = json_dumps(payload)

    if args.output_file:
        output_path = Path(args.output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output + "\n", encoding="utf-8")
        LOGGER.info("Output written to %s", output_path)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
