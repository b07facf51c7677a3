"""Global pytest fixtures & helpers.

Adds project root to path and provides GPX builders plus reusable point
sequences so stage tests do not repeat XML boilerplate.
"""
from __future__ import annotations

import os
import sys
from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tastrails.models import MatchedPoint, MatchedRoute, Point


# --- Factory helpers -------------------------------------------------
TrkPt = Tuple[Optional[str], Optional[str], Optional[str], Optional[str]]


def trkpt_xml(lat: Optional[str], lon: Optional[str], ele: Optional[str] = None, time: Optional[str] = None) -> str:
    attrs = []
    if lat is not None:
        attrs.append(f'lat="{lat}"')
    if lon is not None:
        attrs.append(f'lon="{lon}"')
    children = ""
    if ele is not None:
        children += f"<ele>{ele}</ele>"
    if time is not None:
        children += f"<time>{time}</time>"
    return f"<trkpt {' '.join(attrs)}>{children}</trkpt>"


def make_gpx(
    tracks: Sequence[Sequence[Sequence[TrkPt]]],
    *,
    creator: str = "tastrails-tests",
    track_names: Iterable[Optional[str]] = (),
    track_desc: Optional[str] = None,
    metadata_time: Optional[str] = None,
) -> bytes:
    """Build a GPX 1.1 document; ``tracks`` is tracks -> segments -> points."""

    names = list(track_names)
    body: List[str] = []
    for t_index, segments in enumerate(tracks):
        parts = ["<trk>"]
        if t_index < len(names) and names[t_index] is not None:
            parts.append(f"<name>{names[t_index]}</name>")
        if t_index == 0 and track_desc is not None:
            parts.append(f"<desc>{track_desc}</desc>")
        for segment in segments:
            parts.append("<trkseg>")
            parts.extend(trkpt_xml(*pt) for pt in segment)
            parts.append("</trkseg>")
        parts.append("</trk>")
        body.append("".join(parts))
    metadata = f"<metadata><time>{metadata_time}</time></metadata>" if metadata_time else ""
    document = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="{creator}" xmlns="http://www.topografix.com/GPX/1/1">'
        f"{metadata}{''.join(body)}</gpx>"
    )
    return document.encode("utf-8")


def make_route(elevations: Sequence[Optional[float]], distances: Sequence[float]) -> MatchedRoute:
    """Build a matched route along a meridian with the given step data."""

    originals = tuple(
        Point(latitude=-42.88 + i * 0.001, longitude=147.33, elevation=ele)
        for i, ele in enumerate(elevations)
    )
    matched = tuple(
        MatchedPoint(
            latitude=p.latitude,
            longitude=p.longitude,
            elevation=p.elevation,
            original_index=i,
            road_name="Pinnacle Road",
            distance_from_previous=float(d),
        )
        for i, (p, d) in enumerate(zip(originals, distances))
    )
    return MatchedRoute(points=matched, total_distance=float(sum(distances)), original_points=originals)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def three_point_gpx() -> bytes:
    return make_gpx(
        [
            [
                [
                    ("-42.8821", "147.3272", "20.5", "2024-03-01T08:00:00Z"),
                    ("-42.8830", "147.3290", "35.0", "2024-03-01T08:01:00Z"),
                    ("-42.8842", "147.3311", "51.2", "2024-03-01T08:02:00Z"),
                ]
            ]
        ],
        track_names=["Mount Wellington Foothills"],
        track_desc="Morning loop",
        metadata_time="2024-03-01T07:59:00Z",
    )


@pytest.fixture
def zigzag_points() -> List[Point]:
    """A noisy track heading east with a sharp northward detour."""

    coords = [
        (-42.0000, 147.0000),
        (-42.00001, 147.0005),
        (-41.99999, 147.0010),
        (-42.00002, 147.0015),
        (-41.9980, 147.0020),
        (-42.00001, 147.0025),
        (-42.0000, 147.0030),
        (-42.00001, 147.0035),
        (-42.0000, 147.0040),
    ]
    return [Point(latitude=lat, longitude=lon, elevation=100.0 + i) for i, (lat, lon) in enumerate(coords)]
