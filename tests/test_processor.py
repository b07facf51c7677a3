"""End-to-end tests for the GpxProcessor orchestration."""

from __future__ import annotations

import logging
import threading
from typing import List, Sequence, Tuple

import pytest

from conftest import make_gpx
from tastrails.errors import MatchError, ParseError, SurfaceError
from tastrails.matching import GeometricRoadMatcher, Road, RoadMatcher
from tastrails.models import MatchedPoint, MatchedRoute, Point, SurfaceSegment, SurfaceType
from tastrails.processor import GpxProcessor
from tastrails.surfaces import RoadSurfaceClassifier, SurfaceClassifier


def _straight_gpx(count: int = 30) -> bytes:
    points = [
        ("-42.9000", f"{147.3000 + i * 0.0002:.4f}", f"{10 + i}", None)
        for i in range(count)
    ]
    return make_gpx([[points]], track_names=["Waterfront"])


def test_process_runs_every_stage(three_point_gpx: bytes) -> None:
    result = GpxProcessor().process(three_point_gpx)

    assert len(result.track.points) == 3
    assert result.route.original_points == result.track.points
    assert len(result.route.points) == len(result.simplified)
    assert result.surfaces.segments[0].start_index == 0
    assert result.surfaces.segments[-1].end_index == len(result.route.points) - 1
    assert len(result.elevation.points) == len(result.route.points)


def test_simplification_keeps_provenance() -> None:
    result = GpxProcessor().process(_straight_gpx())

    assert len(result.simplified) == 2
    assert len(result.track.points) == 30
    assert [p.original_index for p in result.route.points] == [0, 29]
    assert result.route.original_points == result.track.points


def test_process_without_simplification() -> None:
    result = GpxProcessor().process(_straight_gpx(), simplify=False)

    assert len(result.route.points) == 30


def test_geometric_pipeline_produces_distances_and_surfaces() -> None:
    road = Road(
        name="Sandy Bay Road",
        coordinates=((147.2990, -42.9000), (147.3100, -42.9000)),
        surface="asphalt",
    )
    matcher = GeometricRoadMatcher([road])
    processor = GpxProcessor(matcher, RoadSurfaceClassifier(matcher.surface_by_road()))

    result = processor.process(_straight_gpx(), simplify=False)

    assert result.route.total_distance == pytest.approx(29 * 0.0002 * 81_700, rel=0.02)
    assert result.elevation.statistics.total_ascent == pytest.approx(29.0)
    assert result.elevation.statistics.average_grade > 0
    assert [s.surface_type for s in result.surfaces.segments] == [SurfaceType.PAVED]


def test_parse_failure_propagates() -> None:
    with pytest.raises(ParseError):
        GpxProcessor().process(b"<gpx")


class _SlowClassifier(SurfaceClassifier):
    def __init__(self, release: threading.Event):
        self.release = release

    def _classify(self, route: MatchedRoute) -> List[SurfaceSegment]:
        self.release.wait(5)
        return []


def test_stage_timeout_maps_to_stage_error(three_point_gpx: bytes, caplog: pytest.LogCaptureFixture) -> None:
    release = threading.Event()
    processor = GpxProcessor(classifier=_SlowClassifier(release), stage_timeout=0.05)

    try:
        with caplog.at_level(logging.ERROR, logger="GpxProcessor"):
            with pytest.raises(SurfaceError) as excinfo:
                processor.process(three_point_gpx)
    finally:
        release.set()

    assert "timed out" in str(excinfo.value)
    assert "timed out" in caplog.text


class _BrokenMatcher(RoadMatcher):
    def _match(self, points: Tuple[Point, ...], indices: Sequence[int]) -> Tuple[List[MatchedPoint], float]:
        raise ConnectionError("matching service unreachable")


def test_matcher_failure_surfaces_as_match_error(three_point_gpx: bytes) -> None:
    with pytest.raises(MatchError) as excinfo:
        GpxProcessor(_BrokenMatcher()).process(three_point_gpx)

    assert isinstance(excinfo.value.details, ConnectionError)


def test_process_many_keeps_input_order() -> None:
    buffers = [
        make_gpx([[[("-42.0", "147.0", "1", None)]]], track_names=["one"]),
        make_gpx([[[("-41.0", "146.0", "2", None)]]], track_names=["two"]),
        make_gpx([[[("-43.0", "145.0", "3", None)]]], track_names=["three"]),
    ]

    results = GpxProcessor().process_many(buffers, max_workers=3)

    assert [r.track.name for r in results] == ["one", "two", "three"]


def test_process_many_empty() -> None:
    assert GpxProcessor().process_many([]) == []


def test_stages_are_individually_callable(three_point_gpx: bytes) -> None:
    processor = GpxProcessor()

    track = processor.parse_file(three_point_gpx)
    simplified = processor.simplify_track(track.points)
    route = processor.match_to_roads(simplified, original_points=track.points)
    surfaces = processor.detect_surfaces(route)
    elevation = processor.process_elevation(route)

    assert route.original_points == track.points
    assert surfaces.segments[-1].end_index == len(route.points) - 1
    assert elevation.statistics.max_elevation == pytest.approx(51.2)
