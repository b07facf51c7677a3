"""Elevation profile and statistics for a matched route."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from ..errors import ElevationError
from ..models import ElevationData, ElevationPoint, ElevationStatistics, MatchedRoute

LOGGER = logging.getLogger(__name__)


def process_elevation(route: MatchedRoute) -> ElevationData:
    """Compute per-point grade and aggregate elevation statistics.

    Points without an elevation count as ``0``. Each point's
    ``cumulative_distance`` is the distance accumulated before its own step.
    ``average_grade`` is the elevation range over the summed step distances,
    not a path-weighted mean of the per-point grades.

    Raises:
        ElevationError: On any internal fault.
    """
    try:
        return _profile(route)
    except Exception as exc:
        LOGGER.error("Failed to process elevation data: %s", exc)
        raise ElevationError.wrap(exc) from exc


def _profile(route: MatchedRoute) -> ElevationData:
    points: List[ElevationPoint] = []
    distance = 0.0
    total_ascent = 0.0
    total_descent = 0.0
    min_elevation = math.inf
    max_elevation = -math.inf
    previous_elevation = 0.0

    for index, point in enumerate(route.points):
        elevation = _elevation_or_zero(point.elevation)
        min_elevation = min(min_elevation, elevation)
        max_elevation = max(max_elevation, elevation)

        grade: Optional[float] = None
        if index > 0:
            delta = elevation - previous_elevation
            if delta > 0:
                total_ascent += delta
            else:
                total_descent += -delta
            if point.distance_from_previous > 0:
                grade = delta / point.distance_from_previous * 100.0

        points.append(
            ElevationPoint(cumulative_distance=distance, elevation=elevation, grade=grade)
        )
        distance += point.distance_from_previous
        previous_elevation = elevation

    if not points:
        min_elevation = max_elevation = 0.0
    average_grade = (
        (max_elevation - min_elevation) / distance * 100.0 if distance > 0 else 0.0
    )
    return ElevationData(
        points=tuple(points),
        statistics=ElevationStatistics(
            min_elevation=min_elevation,
            max_elevation=max_elevation,
            total_ascent=total_ascent,
            total_descent=total_descent,
            average_grade=average_grade,
        ),
    )


def _elevation_or_zero(value: Optional[float]) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return float(value)
