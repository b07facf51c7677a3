"""Track simplification in the longitude/latitude plane."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..config import SIMPLIFY_TOLERANCE_DEG
from ..models import Point

PlaneArray = NDArray[np.float64]


def simplify_track(
    points: Sequence[Point], tolerance: float = SIMPLIFY_TOLERANCE_DEG
) -> List[Point]:
    """Drop points that stay within ``tolerance`` degrees of the simplified path.

    Uses Douglas-Peucker with point-to-segment distances. The first and last
    points are always kept and every returned element is one of the input
    ``Point`` objects, in input order.
    """
    count = len(points)
    if count <= 2 or tolerance <= 0:
        return list(points)
    coords = np.asarray([point.lon_lat for point in points], dtype=float)
    keep = douglas_peucker_mask(coords, tolerance)
    return [point for point, kept in zip(points, keep) if kept]


def douglas_peucker_mask(coords: PlaneArray, tolerance: float) -> NDArray[np.bool_]:
    """Return a boolean mask of the vertices kept by Douglas-Peucker."""

    count = len(coords)
    keep = np.zeros(count, dtype=bool)
    if count == 0:
        return keep
    keep[0] = True
    keep[-1] = True
    sq_tolerance = tolerance * tolerance

    # Explicit stack instead of recursion so very long tracks are safe.
    stack: List[Tuple[int, int]] = [(0, count - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        sq_dists = _sq_segment_distances(
            coords[first + 1 : last], coords[first], coords[last]
        )
        offset = int(np.argmax(sq_dists))
        if sq_dists[offset] > sq_tolerance:
            index = first + 1 + offset
            keep[index] = True
            stack.append((index, last))
            stack.append((first, index))
    return keep


def _sq_segment_distances(
    points: PlaneArray, start: PlaneArray, end: PlaneArray
) -> NDArray[np.float64]:
    """Squared distances from each point to the closed segment ``start``-``end``."""

    seg = end - start
    seg_sq_len = float(np.dot(seg, seg))
    if seg_sq_len == 0.0:
        nearest = np.broadcast_to(start, points.shape)
    else:
        t = ((points - start) @ seg) / seg_sq_len
        t = np.clip(t, 0.0, 1.0)
        nearest = start + t[:, None] * seg
    diff = points - nearest
    return np.einsum("ij,ij->i", diff, diff)
