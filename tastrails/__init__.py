"""GPX processing pipeline for the Tasmanian trails map."""

from .errors import (
    ElevationError,
    GpxProcessingError,
    MatchError,
    ParseError,
    SurfaceError,
)
from .gpx import parse_gpx, process_elevation, simplify_track
from .matching import GeometricRoadMatcher, OsrmRoadMatcher, PassThroughRoadMatcher, RoadMatcher
from .models import (
    ElevationData,
    ElevationPoint,
    ElevationStatistics,
    MatchedPoint,
    MatchedRoute,
    Point,
    SurfaceData,
    SurfaceSegment,
    SurfaceType,
    TrackData,
    TrackMetadata,
)
from .processor import GpxProcessor, ProcessedTrack
from .surfaces import PassThroughSurfaceClassifier, RoadSurfaceClassifier, SurfaceClassifier

__all__ = [
    "parse_gpx",
    "simplify_track",
    "process_elevation",
    "GpxProcessor",
    "ProcessedTrack",
    "RoadMatcher",
    "PassThroughRoadMatcher",
    "GeometricRoadMatcher",
    "OsrmRoadMatcher",
    "SurfaceClassifier",
    "PassThroughSurfaceClassifier",
    "RoadSurfaceClassifier",
    "Point",
    "TrackMetadata",
    "TrackData",
    "MatchedPoint",
    "MatchedRoute",
    "SurfaceType",
    "SurfaceSegment",
    "SurfaceData",
    "ElevationPoint",
    "ElevationStatistics",
    "ElevationData",
    "GpxProcessingError",
    "ParseError",
    "MatchError",
    "SurfaceError",
    "ElevationError",
]
