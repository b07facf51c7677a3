"""Tests for Douglas-Peucker track simplification."""

from __future__ import annotations

import math
from typing import List

import numpy as np
import pytest

from tastrails.gpx.simplify import douglas_peucker_mask, simplify_track
from tastrails.models import Point


def test_empty_input_returns_empty() -> None:
    assert simplify_track([]) == []


@pytest.mark.parametrize("count", [1, 2])
def test_short_inputs_are_returned_unchanged(count: int) -> None:
    points = [Point(latitude=-42.0, longitude=147.0 + i * 0.01) for i in range(count)]

    assert simplify_track(points) == points


def test_keeps_endpoints_and_detour(zigzag_points: List[Point]) -> None:
    result = simplify_track(zigzag_points)

    assert result[0] is zigzag_points[0]
    assert result[-1] is zigzag_points[-1]
    assert len(result) < len(zigzag_points)
    # The northward spike is far beyond 15 m and must survive.
    assert zigzag_points[4] in result


def test_returns_original_point_objects_in_order(zigzag_points: List[Point]) -> None:
    result = simplify_track(zigzag_points)

    positions = [next(i for i, p in enumerate(zigzag_points) if p is q) for q in result]
    assert positions == sorted(positions)


def test_collinear_points_collapse_to_endpoints() -> None:
    points = [Point(latitude=-42.0, longitude=147.0 + i * 0.001) for i in range(10)]

    result = simplify_track(points)

    assert result == [points[0], points[-1]]


def test_idempotent(zigzag_points: List[Point]) -> None:
    once = simplify_track(zigzag_points)

    assert simplify_track(once) == once


def test_idempotent_on_wandering_track() -> None:
    rng = np.random.default_rng(7)
    lat = -42.0 + np.cumsum(rng.normal(0, 0.0002, 300))
    lon = 147.0 + np.cumsum(rng.normal(0, 0.0002, 300))
    points = [Point(latitude=float(a), longitude=float(b)) for a, b in zip(lat, lon)]

    once = simplify_track(points)

    assert len(once) <= len(points)
    assert once[0] is points[0] and once[-1] is points[-1]
    assert simplify_track(once) == once


def test_closed_loop_keeps_both_ends() -> None:
    ring = [
        Point(latitude=-42.0 + 0.01 * math.sin(t), longitude=147.0 + 0.01 * math.cos(t))
        for t in np.linspace(0, 2 * math.pi, 40)
    ]

    result = simplify_track(ring)

    assert result[0] is ring[0]
    assert result[-1] is ring[-1]
    assert 2 < len(result) < len(ring)


def test_mask_on_duplicate_points() -> None:
    coords = np.array([[147.0, -42.0]] * 5, dtype=float)

    mask = douglas_peucker_mask(coords, 0.00015)

    assert mask.tolist() == [True, False, False, False, True]
