"""Tests for GeoJSON projections and JSON serialisation."""

from __future__ import annotations

import json

from conftest import make_route
from tastrails.gpx.export import route_to_feature, to_lon_lat, track_to_feature
from tastrails.gpx.parser import parse_gpx
from tastrails.models import Point, SurfaceData, SurfaceSegment, SurfaceType
from tastrails.utils import json_dumps


def test_coordinates_are_lon_lat_pairs() -> None:
    points = [Point(latitude=-42.88, longitude=147.33), Point(latitude=-42.89, longitude=147.34)]

    assert to_lon_lat(points) == [[147.33, -42.88], [147.34, -42.89]]


def test_track_feature(three_point_gpx: bytes) -> None:
    feature = track_to_feature(parse_gpx(three_point_gpx))

    assert feature["geometry"]["type"] == "LineString"
    assert feature["geometry"]["coordinates"][0] == [147.3272, -42.8821]
    assert feature["properties"]["pointCount"] == 3


def test_route_without_surfaces_is_one_feature() -> None:
    route = make_route([1.0, 2.0, 3.0], [0.0, 5.0, 5.0])

    collection = route_to_feature(route)

    assert collection["type"] == "FeatureCollection"
    assert len(collection["features"]) == 1
    assert collection["features"][0]["properties"]["roads"] == ["Pinnacle Road"]


def test_route_with_surfaces_splits_by_segment() -> None:
    route = make_route([1.0, 2.0, 3.0, 4.0], [0.0, 5.0, 5.0, 5.0])
    surfaces = SurfaceData(
        segments=(
            SurfaceSegment(0, 1, SurfaceType.PAVED, 0.8),
            SurfaceSegment(2, 3, SurfaceType.TRAIL, 0.6),
        )
    )

    features = route_to_feature(route, surfaces)["features"]

    assert [f["properties"]["surfaceType"] for f in features] == ["paved", "trail"]
    assert [len(f["geometry"]["coordinates"]) for f in features] == [2, 2]


def test_json_dumps_uses_camel_case_wire_names() -> None:
    route = make_route([100.0, 150.0], [0.0, 500.0])

    payload = json.loads(json_dumps(route))

    assert payload["totalDistance"] == 500.0
    assert payload["points"][1]["distanceFromPrevious"] == 500.0
    assert payload["points"][1]["originalIndex"] == 1
    assert payload["points"][0]["roadName"] == "Pinnacle Road"
    assert "originalPoints" in payload
