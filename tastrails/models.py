"""Immutable value types shared by every pipeline stage.

Sequences are stored as tuples and every dataclass is frozen, so a stage can
hand its output to concurrent consumers without copying. ``to_dict`` renders
the camelCase shape the web layer expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .utils import isoformat_or_none


@dataclass(frozen=True, slots=True)
class Point:
    """A single GPS fix in decimal degrees."""

    latitude: float
    longitude: float
    elevation: Optional[float] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.latitude) or not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not math.isfinite(self.longitude) or not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    @property
    def lon_lat(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevation": self.elevation,
            "timestamp": isoformat_or_none(self.timestamp),
        }


@dataclass(frozen=True, slots=True)
class TrackMetadata:
    recorded_at: Optional[datetime] = None
    creator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recordedAt": isoformat_or_none(self.recorded_at),
            "creator": self.creator,
        }


@dataclass(frozen=True, slots=True)
class TrackData:
    """Parsed contents of one GPX buffer with all tracks flattened."""

    points: Tuple[Point, ...]
    name: Optional[str] = None
    description: Optional[str] = None
    metadata: TrackMetadata = field(default_factory=TrackMetadata)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "points": [point.to_dict() for point in self.points],
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class MatchedPoint(Point):
    """A point annotated with road attribution and step distance."""

    original_index: int = 0
    road_name: Optional[str] = None
    distance_from_previous: float = 0.0

    def __post_init__(self) -> None:
        Point.__post_init__(self)
        if self.original_index < 0:
            raise ValueError(f"original_index must be >= 0, got {self.original_index}")
        if not self.distance_from_previous >= 0.0:
            raise ValueError(
                f"distance_from_previous must be >= 0, got {self.distance_from_previous}"
            )

    def to_dict(self) -> Dict[str, Any]:
        payload = Point.to_dict(self)
        payload.update(
            {
                "originalIndex": self.original_index,
                "roadName": self.road_name,
                "distanceFromPrevious": self.distance_from_previous,
            }
        )
        return payload


@dataclass(frozen=True, slots=True)
class MatchedRoute:
    """Matched view of a track that keeps the full source sequence."""

    points: Tuple[MatchedPoint, ...]
    total_distance: float
    original_points: Tuple[Point, ...]

    def __post_init__(self) -> None:
        if not self.total_distance >= 0.0:
            raise ValueError(f"total_distance must be >= 0, got {self.total_distance}")
        previous = -1
        for point in self.points:
            index = point.original_index
            if index <= previous:
                raise ValueError(
                    f"original_index values must be strictly increasing ({previous} -> {index})"
                )
            if index >= len(self.original_points):
                raise ValueError(
                    f"original_index {index} outside source of {len(self.original_points)} points"
                )
            previous = index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "points": [point.to_dict() for point in self.points],
            "totalDistance": self.total_distance,
            "originalPoints": [point.to_dict() for point in self.original_points],
        }


class SurfaceType(str, Enum):
    PAVED = "paved"
    UNPAVED = "unpaved"
    TRAIL = "trail"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "SurfaceType":
        """Map a free-form or OpenStreetMap ``surface=*`` label onto a member."""

        if not label:
            return cls.UNKNOWN
        normalized = label.strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            return _OSM_SURFACES.get(normalized, cls.UNKNOWN)


_OSM_SURFACES: Dict[str, SurfaceType] = {
    **dict.fromkeys(
        ("asphalt", "concrete", "paving_stones", "sett", "chipseal", "metal", "wood"),
        SurfaceType.PAVED,
    ),
    **dict.fromkeys(
        ("gravel", "fine_gravel", "compacted", "pebblestone", "dirt"),
        SurfaceType.UNPAVED,
    ),
    **dict.fromkeys(
        ("ground", "earth", "grass", "mud", "sand", "rock", "woodchips"),
        SurfaceType.TRAIL,
    ),
}


@dataclass(frozen=True, slots=True)
class SurfaceSegment:
    start_index: int
    end_index: int
    surface_type: SurfaceType
    confidence: float

    def __post_init__(self) -> None:
        if self.start_index < 0 or self.end_index < self.start_index:
            raise ValueError(
                f"invalid segment bounds [{self.start_index}, {self.end_index}]"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "surfaceType": self.surface_type.value,
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class SurfaceData:
    """Ordered, non-overlapping surface runs. Gaps mean unclassified."""

    segments: Tuple[SurfaceSegment, ...] = ()

    def __post_init__(self) -> None:
        previous_end = -1
        for segment in self.segments:
            if segment.start_index <= previous_end:
                raise ValueError(
                    f"segment starting at {segment.start_index} overlaps or is out of order"
                )
            previous_end = segment.end_index

    def check_bounds(self, point_count: int) -> None:
        """Raise ``ValueError`` when a segment indexes past ``point_count`` points."""

        if self.segments and self.segments[-1].end_index >= point_count:
            raise ValueError(
                f"segment end {self.segments[-1].end_index} outside route of {point_count} points"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"segments": [segment.to_dict() for segment in self.segments]}


@dataclass(frozen=True, slots=True)
class ElevationPoint:
    cumulative_distance: float
    elevation: float
    grade: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cumulativeDistance": self.cumulative_distance,
            "elevation": self.elevation,
            "grade": self.grade,
        }


@dataclass(frozen=True, slots=True)
class ElevationStatistics:
    min_elevation: float
    max_elevation: float
    total_ascent: float
    total_descent: float
    average_grade: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minElevation": self.min_elevation,
            "maxElevation": self.max_elevation,
            "totalAscent": self.total_ascent,
            "totalDescent": self.total_descent,
            "averageGrade": self.average_grade,
        }


@dataclass(frozen=True, slots=True)
class ElevationData:
    points: Tuple[ElevationPoint, ...]
    statistics: ElevationStatistics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "points": [point.to_dict() for point in self.points],
            "statistics": self.statistics.to_dict(),
        }


def freeze_points(points: Iterable[Point]) -> Tuple[Point, ...]:
    """Return ``points`` as a tuple, reusing it when it already is one."""

    if isinstance(points, tuple):
        return points
    return tuple(points)


def lon_lat_pairs(points: Iterable[Point]) -> List[List[float]]:
    return [[point.longitude, point.latitude] for point in points]


__all__ = [
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
    "freeze_points",
    "lon_lat_pairs",
]
