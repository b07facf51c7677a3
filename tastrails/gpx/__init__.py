"""GPX stages that need no external service: parse, simplify, elevation."""

from .parser import parse_gpx
from .simplify import simplify_track
from .elevation import process_elevation
from .export import route_to_feature, to_lon_lat, track_to_feature

__all__ = [
    "parse_gpx",
    "simplify_track",
    "process_elevation",
    "route_to_feature",
    "to_lon_lat",
    "track_to_feature",
]
