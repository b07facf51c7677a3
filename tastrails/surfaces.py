"""Surface classification of matched routes."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import List, Mapping, Optional, Union

from .config import DEFAULT_SURFACE_CONFIDENCE, ROAD_SURFACE_CONFIDENCE
from .errors import SurfaceError
from .models import MatchedRoute, SurfaceData, SurfaceSegment, SurfaceType

LOGGER = logging.getLogger(__name__)

SurfaceLabel = Union[SurfaceType, str]


class SurfaceClassifier(ABC):
    """Partition a matched route into surface runs.

    Subclasses implement :meth:`_classify`; the returned segments are checked
    against the route length and any fault surfaces as :class:`SurfaceError`.
    """

    def detect_surfaces(self, route: MatchedRoute) -> SurfaceData:
        try:
            surfaces = SurfaceData(segments=tuple(self._classify(route)))
            surfaces.check_bounds(len(route.points))
        except Exception as exc:
            LOGGER.error("Failed to detect surfaces: %s", exc)
            raise SurfaceError.wrap(exc) from exc
        LOGGER.debug(
            "%s produced %d segments for %d points",
            self.__class__.__name__,
            len(surfaces.segments),
            len(route.points),
        )
        return surfaces

    @abstractmethod
    def _classify(self, route: MatchedRoute) -> List[SurfaceSegment]:
        """Return ordered, non-overlapping segments for ``route``."""


class PassThroughSurfaceClassifier(SurfaceClassifier):
    """Interim classifier: one ``unknown`` segment spanning the whole route."""

    def __init__(self, confidence: float = DEFAULT_SURFACE_CONFIDENCE):
        self.confidence = confidence

    def _classify(self, route: MatchedRoute) -> List[SurfaceSegment]:
        if not route.points:
            return []
        return [
            SurfaceSegment(
                start_index=0,
                end_index=len(route.points) - 1,
                surface_type=SurfaceType.UNKNOWN,
                confidence=self.confidence,
            )
        ]


class RoadSurfaceClassifier(SurfaceClassifier):
    """Classify by looking up each point's road name in a surface table.

    Consecutive points with the same surface form one segment. Points on
    roads missing from the table form ``unknown`` runs at the fallback
    confidence, so the segments always cover the whole route.
    """

    def __init__(
        self,
        road_surfaces: Mapping[str, SurfaceLabel],
        confidence: float = ROAD_SURFACE_CONFIDENCE,
        unknown_confidence: float = DEFAULT_SURFACE_CONFIDENCE,
    ):
        self.road_surfaces = {
            name.strip().lower(): _as_surface(label)
            for name, label in road_surfaces.items()
        }
        self.confidence = confidence
        self.unknown_confidence = unknown_confidence

    def surface_for(self, road_name: Optional[str]) -> SurfaceType:
        if not road_name:
            return SurfaceType.UNKNOWN
        return self.road_surfaces.get(road_name.strip().lower(), SurfaceType.UNKNOWN)

    def _classify(self, route: MatchedRoute) -> List[SurfaceSegment]:
        segments: List[SurfaceSegment] = []
        run_start = 0
        run_type: Optional[SurfaceType] = None
        for index, point in enumerate(route.points):
            surface = self.surface_for(point.road_name)
            if run_type is None:
                run_type = surface
            elif surface is not run_type:
                segments.append(self._segment(run_start, index - 1, run_type))
                run_start = index
                run_type = surface
        if run_type is not None:
            segments.append(self._segment(run_start, len(route.points) - 1, run_type))
        return segments

    def _segment(self, start: int, end: int, surface: SurfaceType) -> SurfaceSegment:
        confidence = (
            self.unknown_confidence if surface is SurfaceType.UNKNOWN else self.confidence
        )
        return SurfaceSegment(
            start_index=start,
            end_index=end,
            surface_type=surface,
            confidence=confidence,
        )


def _as_surface(label: SurfaceLabel) -> SurfaceType:
    if isinstance(label, SurfaceType):
        return label
    return SurfaceType.from_label(label)


__all__ = [
    "SurfaceClassifier",
    "PassThroughSurfaceClassifier",
    "RoadSurfaceClassifier",
]
