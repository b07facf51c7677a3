"""GeoJSON projections of pipeline outputs for the map layer.

Coordinates are always ``[longitude, latitude]`` pairs.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..models import MatchedRoute, Point, SurfaceData, TrackData, lon_lat_pairs

Feature = Dict[str, Any]


def to_lon_lat(points: Sequence[Point]) -> List[List[float]]:
    """Return ``points`` as ``[lon, lat]`` pairs."""

    return lon_lat_pairs(points)


def _line_feature(points: Sequence[Point], properties: Dict[str, Any]) -> Feature:
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": to_lon_lat(points)},
        "properties": properties,
    }


def track_to_feature(track: TrackData) -> Feature:
    """Render a parsed track as a single LineString feature."""

    return _line_feature(
        track.points,
        {
            "name": track.name,
            "description": track.description,
            "creator": track.metadata.creator,
            "pointCount": len(track.points),
        },
    )


def route_to_feature(
    route: MatchedRoute, surfaces: Optional[SurfaceData] = None
) -> Dict[str, Any]:
    """Render a matched route as a FeatureCollection.

    Without ``surfaces`` the collection holds one LineString for the whole
    route. With ``surfaces`` each segment becomes its own LineString tagged
    with ``surfaceType`` and ``confidence``.
    """
    features: List[Feature] = []
    if surfaces is None or not surfaces.segments:
        if route.points:
            features.append(
                _line_feature(
                    route.points,
                    {
                        "totalDistance": route.total_distance,
                        "roads": _road_names(route.points),
                    },
                )
            )
    else:
        for segment in surfaces.segments:
            chunk = route.points[segment.start_index : segment.end_index + 1]
            features.append(
                _line_feature(
                    chunk,
                    {
                        "startIndex": segment.start_index,
                        "endIndex": segment.end_index,
                        "surfaceType": segment.surface_type.value,
                        "confidence": segment.confidence,
                        "roads": _road_names(chunk),
                    },
                )
            )
    return {"type": "FeatureCollection", "features": features}


def _road_names(points: Sequence[Any]) -> List[str]:
    names: List[str] = []
    for point in points:
        name = getattr(point, "road_name", None)
        if name and (not names or names[-1] != name):
            names.append(name)
    return names
