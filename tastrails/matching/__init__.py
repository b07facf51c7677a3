"""Road matching implementations.

``PassThroughRoadMatcher`` is the default used by the pipeline. The
geometric and OSRM matchers produce real road attribution and distances.
"""

from .base import PassThroughRoadMatcher, RoadMatcher
from .geometry import GeometricRoadMatcher
from .models import Road, roads_from_geojson
from .osrm import OsrmResponseError, OsrmRoadMatcher

__all__ = [
    "RoadMatcher",
    "PassThroughRoadMatcher",
    "GeometricRoadMatcher",
    "OsrmRoadMatcher",
    "OsrmResponseError",
    "Road",
    "roads_from_geojson",
]
