"""Pipeline orchestration.

``GpxProcessor`` exposes each stage as a method so callers can compose them
freely, plus ``process``/``process_many`` for the common end-to-end path.
Matcher and classifier are injected; the pass-through implementations are
used when none is given.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from .config import (
    PIPELINE_MAX_WORKERS,
    SIMPLIFY_ENABLED,
    SIMPLIFY_TOLERANCE_DEG,
    STAGE_TIMEOUT_SECONDS,
)
from .errors import ElevationError, GpxProcessingError, MatchError, SurfaceError
from .gpx.elevation import process_elevation
from .gpx.parser import parse_gpx
from .gpx.simplify import simplify_track
from .matching.base import PassThroughRoadMatcher, RoadMatcher
from .models import (
    ElevationData,
    MatchedRoute,
    Point,
    SurfaceData,
    TrackData,
)
from .surfaces import PassThroughSurfaceClassifier, SurfaceClassifier

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ProcessedTrack:
    """Every stage output for one GPX buffer."""

    track: TrackData
    simplified: Tuple[Point, ...]
    route: MatchedRoute
    surfaces: SurfaceData
    elevation: ElevationData

    def to_dict(self) -> Dict[str, Any]:
        return {
            "track": self.track.to_dict(),
            "simplifiedCount": len(self.simplified),
            "route": self.route.to_dict(),
            "surfaces": self.surfaces.to_dict(),
            "elevation": self.elevation.to_dict(),
        }


class GpxProcessor:
    """Run the GPX stages with an injected road matcher and surface classifier."""

    def __init__(
        self,
        matcher: Optional[RoadMatcher] = None,
        classifier: Optional[SurfaceClassifier] = None,
        *,
        simplify_tolerance: float = SIMPLIFY_TOLERANCE_DEG,
        stage_timeout: Optional[float] = STAGE_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self.matcher = matcher or PassThroughRoadMatcher()
        self.classifier = classifier or PassThroughSurfaceClassifier()
        self.simplify_tolerance = simplify_tolerance
        self.stage_timeout = stage_timeout if stage_timeout and stage_timeout > 0 else None
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # -- individual stages ------------------------------------------------
    def parse_file(self, buffer: bytes) -> TrackData:
        return parse_gpx(buffer)

    def simplify_track(self, points: Sequence[Point]) -> List[Point]:
        return simplify_track(points, self.simplify_tolerance)

    def match_to_roads(
        self,
        points: Sequence[Point],
        *,
        original_points: Optional[Sequence[Point]] = None,
    ) -> MatchedRoute:
        return self.matcher.match_to_roads(points, original_points=original_points)

    def detect_surfaces(self, route: MatchedRoute) -> SurfaceData:
        return self.classifier.detect_surfaces(route)

    def process_elevation(self, route: MatchedRoute) -> ElevationData:
        return process_elevation(route)

    # -- orchestration ----------------------------------------------------
    def process(self, buffer: bytes, *, simplify: bool = SIMPLIFY_ENABLED) -> ProcessedTrack:
        """Run every stage for ``buffer``.

        Surfaces and elevation run concurrently once the route is matched.
        A stage exceeding ``stage_timeout`` raises its own error kind.
        """
        track = self.parse_file(buffer)
        simplified = tuple(self.simplify_track(track.points)) if simplify else track.points
        self._log.info(
            "Processing track name=%r points=%d simplified=%d",
            track.name,
            len(track.points),
            len(simplified),
        )
        # Shut down without waiting so a timed-out stage never blocks the caller.
        executor = ThreadPoolExecutor(max_workers=2)
        try:
            route = self._await(
                executor.submit(
                    self.match_to_roads, simplified, original_points=track.points
                ),
                MatchError,
            )
            surfaces_future = executor.submit(self.detect_surfaces, route)
            elevation_future = executor.submit(self.process_elevation, route)
            surfaces = self._await(surfaces_future, SurfaceError)
            elevation = self._await(elevation_future, ElevationError)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return ProcessedTrack(
            track=track,
            simplified=simplified,
            route=route,
            surfaces=surfaces,
            elevation=elevation,
        )

    def process_many(
        self,
        buffers: Sequence[bytes],
        *,
        max_workers: int = PIPELINE_MAX_WORKERS,
        simplify: bool = SIMPLIFY_ENABLED,
    ) -> List[ProcessedTrack]:
        """Process independent buffers concurrently, keeping input order.

        The first failing buffer's error propagates.
        """
        if not buffers:
            return []
        workers = max(1, min(max_workers, len(buffers)))
        self._log.info("Processing %d GPX buffers with %d workers", len(buffers), workers)

        def run(data: bytes) -> ProcessedTrack:
            return self.process(data, simplify=simplify)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(run, buffers))

    def _await(self, future: "Future[T]", error_type: Type[GpxProcessingError]) -> T:
        try:
            return future.result(timeout=self.stage_timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            self._log.error(
                "%s stage timed out after %.1fs", error_type.__name__, self.stage_timeout
            )
            raise error_type(
                f"timed out after {self.stage_timeout:g}s", details=exc
            ) from exc
