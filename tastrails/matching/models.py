"""Dataclasses describing the road network consumed by the matchers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

LonLat = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class Road:
    """A named road or path polyline in ``(lon, lat)`` order."""

    name: str
    coordinates: Tuple[LonLat, ...]
    surface: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.coordinates) < 2:
            raise ValueError(f"Road {self.name!r} needs at least two coordinates")

    @classmethod
    def from_feature(cls, feature: Mapping[str, Any]) -> List["Road"]:
        """Build roads from a GeoJSON LineString/MultiLineString feature."""

        geometry = feature.get("geometry") or {}
        properties = feature.get("properties") or {}
        name = str(properties.get("name") or properties.get("ref") or "")
        surface = properties.get("surface")
        kind = geometry.get("type")
        if kind == "LineString":
            lines = [geometry.get("coordinates") or []]
        elif kind == "MultiLineString":
            lines = geometry.get("coordinates") or []
        else:
            return []
        return [
            cls(
                name=name,
                coordinates=tuple((float(c[0]), float(c[1])) for c in line),
                surface=surface,
            )
            for line in lines
            if len(line) >= 2
        ]


def roads_from_geojson(collection: Mapping[str, Any]) -> List[Road]:
    """Flatten a GeoJSON FeatureCollection into :class:`Road` values."""

    features: Iterable[Mapping[str, Any]]
    if collection.get("type") == "Feature":
        features = [collection]
    else:
        features = collection.get("features") or []
    roads: List[Road] = []
    for feature in features:
        roads.extend(Road.from_feature(feature))
    return roads
