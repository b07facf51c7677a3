"""Road matching capability and the pass-through implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import List, Optional, Sequence, Tuple

from ..config import UNKNOWN_ROAD
from ..errors import MatchError
from ..models import MatchedPoint, MatchedRoute, Point, freeze_points

LOGGER = logging.getLogger(__name__)


class RoadMatcher(ABC):
    """Turn an ordered point sequence into a :class:`MatchedRoute`.

    Subclasses implement :meth:`_match`. The base class owns the shared
    contract: ``original_index`` values point into ``original_points`` and
    strictly increase, and any fault surfaces once as :class:`MatchError`.
    """

    unknown_road: str = UNKNOWN_ROAD

    def match_to_roads(
        self,
        points: Sequence[Point],
        *,
        original_points: Optional[Sequence[Point]] = None,
    ) -> MatchedRoute:
        """Match ``points`` to roads.

        Args:
            points: Ordered points to match, usually the simplifier output.
            original_points: Full source sequence ``points`` was derived from.
                Defaults to ``points`` itself.

        Raises:
            MatchError: If ``points`` is not an ordered subsequence of
                ``original_points`` or the matching backend fails.
        """
        source = freeze_points(points)
        originals = source if original_points is None else freeze_points(original_points)
        try:
            indices = source_indices(source, originals)
            matched, total_distance = self._match(source, indices)
            route = MatchedRoute(
                points=tuple(matched),
                total_distance=float(total_distance),
                original_points=originals,
            )
        except Exception as exc:
            LOGGER.error("Failed to match route to roads: %s", exc)
            raise MatchError.wrap(exc) from exc
        LOGGER.debug(
            "%s matched %d/%d points distance=%.1fm",
            self.__class__.__name__,
            len(route.points),
            len(originals),
            route.total_distance,
        )
        return route

    @abstractmethod
    def _match(
        self, points: Tuple[Point, ...], indices: Sequence[int]
    ) -> Tuple[List[MatchedPoint], float]:
        """Return matched points (one per input) and the route length in metres."""


class PassThroughRoadMatcher(RoadMatcher):
    """Interim matcher that attributes every point to the unknown road.

    No geometry is computed: ``distance_from_previous`` and
    ``total_distance`` are reported as ``0``.
    """

    def _match(
        self, points: Tuple[Point, ...], indices: Sequence[int]
    ) -> Tuple[List[MatchedPoint], float]:
        matched = [
            MatchedPoint(
                latitude=point.latitude,
                longitude=point.longitude,
                elevation=point.elevation,
                timestamp=point.timestamp,
                original_index=index,
                road_name=self.unknown_road,
                distance_from_previous=0.0,
            )
            for point, index in zip(points, indices)
        ]
        return matched, 0.0


def source_indices(
    points: Sequence[Point], original_points: Sequence[Point]
) -> List[int]:
    """Locate each of ``points`` in ``original_points``, preserving order.

    A single forward walk over ``original_points``: each element is accepted
    when it is the same object or an equal value, so the mapping is linear in
    the length of the source.
    """
    if points is original_points:
        return list(range(len(points)))
    indices: List[int] = []
    cursor = 0
    total = len(original_points)
    for point in points:
        while cursor < total:
            candidate = original_points[cursor]
            if candidate is point or candidate == point:
                break
            cursor += 1
        if cursor >= total:
            raise ValueError(
                "points must be an ordered subsequence of original_points "
                f"(no match for {point.latitude:.6f},{point.longitude:.6f})"
            )
        indices.append(cursor)
        cursor += 1
    return indices
