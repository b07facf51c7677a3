"""Projection and distance helpers shared by the matchers."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Geod, Transformer

from .models import LonLat

MetricArray = NDArray[np.float64]

_GEOD = Geod(ellps="WGS84")


def build_local_transformers(
    coordinates: Sequence[LonLat],
) -> Tuple[Transformer, Transformer]:
    """Return forward/inverse transformers for a UTM zone centred on ``coordinates``."""

    if not coordinates:
        raise ValueError("Cannot pick a projection for an empty coordinate set")
    lons = [pt[0] for pt in coordinates]
    lats = [pt[1] for pt in coordinates]
    mean_lat = float(np.mean(lats))
    mean_lon = float(np.mean(lons))
    zone = int((mean_lon + 180.0) // 6.0) + 1
    zone = max(1, min(zone, 60))
    if mean_lat >= 0:
        epsg = 32600 + zone
    else:
        epsg = 32700 + zone
    target_crs = CRS.from_epsg(epsg)
    wgs84 = CRS.from_epsg(4326)
    forward = Transformer.from_crs(wgs84, target_crs, always_xy=True)
    inverse = Transformer.from_crs(target_crs, wgs84, always_xy=True)
    return forward, inverse


def project_lon_lat(
    coordinates: Sequence[LonLat], transformer: Transformer
) -> MetricArray:
    """Project ``(lon, lat)`` pairs through an existing transformer."""

    if not coordinates:
        return np.empty((0, 2), dtype=float)
    lons = np.asarray([pt[0] for pt in coordinates], dtype=float)
    lats = np.asarray([pt[1] for pt in coordinates], dtype=float)
    xs, ys = transformer.transform(lons, lats)
    return np.column_stack((xs, ys)).astype(float, copy=False)


def geodesic_steps(coordinates: Sequence[LonLat]) -> NDArray[np.float64]:
    """Return WGS84 distances in metres between consecutive coordinates.

    The result has one entry per coordinate; the first entry is ``0``.
    """
    count = len(coordinates)
    steps = np.zeros(count, dtype=float)
    if count < 2:
        return steps
    lons = np.asarray([pt[0] for pt in coordinates], dtype=float)
    lats = np.asarray([pt[1] for pt in coordinates], dtype=float)
    _, _, dists = _GEOD.inv(lons[:-1], lats[:-1], lons[1:], lats[1:])
    steps[1:] = np.abs(np.asarray(dists, dtype=float))
    return steps
