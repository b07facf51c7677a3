"""Offline map matching against a known road network."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import shapely
from shapely.geometry import LineString
from shapely.strtree import STRtree

from ..config import ROAD_SNAP_TOLERANCE_M
from ..models import MatchedPoint, Point
from .base import RoadMatcher
from .models import LonLat, Road
from .preprocessing import build_local_transformers, geodesic_steps, project_lon_lat

LOGGER = logging.getLogger(__name__)


class GeometricRoadMatcher(RoadMatcher):
    """Snap each point onto the nearest road within ``snap_tolerance_m``.

    Roads are projected once into a local UTM zone and indexed with an
    ``STRtree``; the instance is read-only afterwards and can be shared
    between threads. Points farther than the tolerance from every road keep
    their coordinates and are attributed to the unknown road.
    """

    def __init__(
        self,
        roads: Sequence[Road],
        snap_tolerance_m: float = ROAD_SNAP_TOLERANCE_M,
    ):
        if not roads:
            raise ValueError("GeometricRoadMatcher needs at least one road")
        if snap_tolerance_m < 0:
            raise ValueError("snap_tolerance_m must be >= 0")
        self.roads: Tuple[Road, ...] = tuple(roads)
        self.snap_tolerance_m = float(snap_tolerance_m)
        all_coords: List[LonLat] = [c for road in self.roads for c in road.coordinates]
        self._to_metric, self._to_lonlat = build_local_transformers(all_coords)
        self._lines = np.asarray(
            [
                LineString(project_lon_lat(road.coordinates, self._to_metric))
                for road in self.roads
            ],
            dtype=object,
        )
        self._tree = STRtree(self._lines)

    def surface_by_road(self) -> Dict[str, str]:
        """Return the ``road name -> surface`` labels carried by the network."""

        return {road.name: road.surface for road in self.roads if road.name and road.surface}

    def _match(
        self, points: Tuple[Point, ...], indices: Sequence[int]
    ) -> Tuple[List[MatchedPoint], float]:
        if not points:
            return [], 0.0
        metric = project_lon_lat([point.lon_lat for point in points], self._to_metric)
        geoms = shapely.points(metric[:, 0], metric[:, 1])
        nearest = np.asarray(self._tree.nearest(geoms), dtype=int)
        lines = self._lines[nearest]
        offsets = shapely.distance(lines, geoms)
        snapped = shapely.line_interpolate_point(
            lines, shapely.line_locate_point(lines, geoms)
        )
        within = offsets <= self.snap_tolerance_m

        snapped_xy = shapely.get_coordinates(snapped)
        snapped_lon, snapped_lat = self._to_lonlat.transform(
            snapped_xy[:, 0], snapped_xy[:, 1]
        )

        coords: List[LonLat] = []
        names: List[Optional[str]] = []
        for i, point in enumerate(points):
            if within[i]:
                coords.append((float(snapped_lon[i]), float(snapped_lat[i])))
                names.append(self.roads[int(nearest[i])].name or self.unknown_road)
            else:
                coords.append(point.lon_lat)
                names.append(self.unknown_road)

        steps = geodesic_steps(coords)
        matched = [
            MatchedPoint(
                latitude=_clamp(lat, 90.0),
                longitude=_clamp(lon, 180.0),
                elevation=point.elevation,
                timestamp=point.timestamp,
                original_index=index,
                road_name=name,
                distance_from_previous=float(step),
            )
            for point, index, (lon, lat), name, step in zip(
                points, indices, coords, names, steps
            )
        ]
        LOGGER.debug(
            "Snapped %d of %d points within %.1fm",
            int(np.count_nonzero(within)),
            len(points),
            self.snap_tolerance_m,
        )
        return matched, float(np.sum(steps))


def _clamp(value: float, bound: float) -> float:
    """Keep round-tripped projections inside the valid degree range."""

    return max(-bound, min(bound, float(value)))
