"""Central configuration for the Tasmanian trails GPX pipeline.

All values are constants imported by the rest of the package. Each one can
be overridden through an environment variable (optionally via a local
`.env`) so deployments can tune the pipeline without code changes.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------
# Douglas-Peucker tolerance in degrees of the lon/lat plane. 0.00015 degrees
# is roughly 15 metres at the equator.
SIMPLIFY_TOLERANCE_DEG = _env_float("TASTRAILS_SIMPLIFY_TOLERANCE_DEG", 0.00015)

# Skip simplification entirely when False (useful for debugging raw tracks).
SIMPLIFY_ENABLED = _env_bool("TASTRAILS_SIMPLIFY_ENABLED", True)


# ---------------------------------------------------------------------------
# Road matching
# ---------------------------------------------------------------------------
# Road name reported for points no road could be attributed to.
UNKNOWN_ROAD = os.getenv("TASTRAILS_UNKNOWN_ROAD", "Unknown Road")

# Maximum distance (metres) between a GPS point and a road for the geometric
# matcher to snap the point onto that road.
ROAD_SNAP_TOLERANCE_M = _env_float("TASTRAILS_ROAD_SNAP_TOLERANCE_M", 25.0)

# OSRM-compatible map matching service.
OSRM_BASE_URL = os.getenv("TASTRAILS_OSRM_BASE_URL", "https://router.project-osrm.org")
OSRM_PROFILE = os.getenv("TASTRAILS_OSRM_PROFILE", "foot")

# Search radius (metres) sent with every coordinate to the matching service.
OSRM_RADIUS_M = _env_float("TASTRAILS_OSRM_RADIUS_M", 25.0)


# ---------------------------------------------------------------------------
# Surface classification
# ---------------------------------------------------------------------------
# Confidence attached to segments whose surface could not be determined.
DEFAULT_SURFACE_CONFIDENCE = _env_float("TASTRAILS_DEFAULT_SURFACE_CONFIDENCE", 0.5)

# Confidence attached to segments classified from road surface attributes.
ROAD_SURFACE_CONFIDENCE = _env_float("TASTRAILS_ROAD_SURFACE_CONFIDENCE", 0.8)


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# HTTP session pool sizes for concurrent requests.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_int("TASTRAILS_REQUEST_TIMEOUT", 15)

# Threads used when processing several GPX files at once.
PIPELINE_MAX_WORKERS = _env_int("TASTRAILS_PIPELINE_MAX_WORKERS", 4)

# Seconds a single stage may run inside the orchestrator before it is
# reported as failed. Set to 0 to wait indefinitely.
STAGE_TIMEOUT_SECONDS = _env_float("TASTRAILS_STAGE_TIMEOUT_SECONDS", 60.0)
