"""Map matching through an OSRM-compatible ``/match`` HTTP service."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

from polyline import encode as polyline_encode
from requests import Session

from ..config import (
    OSRM_BASE_URL,
    OSRM_PROFILE,
    OSRM_RADIUS_M,
    REQUEST_TIMEOUT,
)
from ..models import MatchedPoint, Point
from .base import RoadMatcher
from .models import LonLat
from .preprocessing import geodesic_steps
from .session import create_default_session

LOGGER = logging.getLogger(__name__)

# The public OSRM demo server rejects requests above 100 coordinates.
DEFAULT_MAX_COORDINATES = 100


class OsrmResponseError(RuntimeError):
    """Raised when the service answers with a non-``Ok`` code or bad payload."""


class OsrmRoadMatcher(RoadMatcher):
    """Match points with an OSRM ``match`` endpoint.

    Points are sent in chunks of at most ``max_coordinates``. Tracepoints the
    service could not match keep their raw coordinates and are attributed to
    the unknown road. Step distances are geodesic between the returned
    locations.
    """

    def __init__(
        self,
        base_url: str = OSRM_BASE_URL,
        profile: str = OSRM_PROFILE,
        *,
        session: Optional[Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        radius_m: float = OSRM_RADIUS_M,
        max_coordinates: int = DEFAULT_MAX_COORDINATES,
    ):
        if max_coordinates < 2:
            raise ValueError("max_coordinates must be at least 2")
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.session = session or create_default_session()
        self.timeout = timeout
        self.radius_m = radius_m
        self.max_coordinates = max_coordinates

    def _match(
        self, points: Tuple[Point, ...], indices: Sequence[int]
    ) -> Tuple[List[MatchedPoint], float]:
        if not points:
            return [], 0.0
        coords: List[LonLat] = []
        names: List[str] = []
        for start in range(0, len(points), self.max_coordinates):
            chunk = points[start : start + self.max_coordinates]
            tracepoints = self._request(chunk)
            for point, tracepoint in zip(chunk, tracepoints):
                location, name = self._read_tracepoint(point, tracepoint)
                coords.append(location)
                names.append(name)

        steps = geodesic_steps(coords)
        matched = [
            MatchedPoint(
                latitude=lat,
                longitude=lon,
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
        return matched, float(steps.sum())

    def build_url(self, points: Sequence[Point]) -> str:
        encoded = polyline_encode([(p.latitude, p.longitude) for p in points], 5)
        return f"{self.base_url}/match/v1/{self.profile}/polyline({quote(encoded, safe='')})"

    def build_params(self, points: Sequence[Point]) -> Dict[str, str]:
        params = {
            "overview": "false",
            "steps": "false",
            "radiuses": ";".join(f"{self.radius_m:g}" for _ in points),
        }
        stamps = [p.timestamp for p in points]
        if all(stamp is not None for stamp in stamps):
            seconds = [int(stamp.timestamp()) for stamp in stamps]  # type: ignore[union-attr]
            if all(b >= a for a, b in zip(seconds, seconds[1:])):
                params["timestamps"] = ";".join(str(s) for s in seconds)
        return params

    def _request(self, chunk: Sequence[Point]) -> List[Optional[Dict[str, Any]]]:
        if len(chunk) < 2:
            # The service needs two coordinates; a lone trailing point is kept raw.
            return [None] * len(chunk)
        url = self.build_url(chunk)
        LOGGER.debug("GET %s (%d coordinates)", url, len(chunk))
        response = self.session.get(
            url, params=self.build_params(chunk), timeout=self.timeout
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise OsrmResponseError(f"Unexpected response type: {type(payload)}")
        code = payload.get("code")
        if code != "Ok":
            message = payload.get("message") or "no message"
            raise OsrmResponseError(f"service returned {code}: {message}")
        tracepoints = payload.get("tracepoints")
        if not isinstance(tracepoints, list) or len(tracepoints) != len(chunk):
            raise OsrmResponseError(
                f"expected {len(chunk)} tracepoints, got "
                f"{len(tracepoints) if isinstance(tracepoints, list) else tracepoints!r}"
            )
        return tracepoints

    def _read_tracepoint(
        self, point: Point, tracepoint: Optional[Dict[str, Any]]
    ) -> Tuple[LonLat, str]:
        if not tracepoint:
            return point.lon_lat, self.unknown_road
        location = tracepoint.get("location") or [point.longitude, point.latitude]
        name = tracepoint.get("name") or self.unknown_road
        return (float(location[0]), float(location[1])), str(name)
