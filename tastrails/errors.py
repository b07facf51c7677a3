"""Central error types used across the pipeline.

Each stage raises exactly one error kind. The triggering exception is kept
on ``details`` and chained as ``__cause__`` so callers can inspect it.
"""

from __future__ import annotations

from typing import Any, Optional


class GpxProcessingError(RuntimeError):
    """Base error for every pipeline stage failure."""

    code = "PROCESSING_ERROR"
    prefix = "Failed to process GPX data"

    def __init__(self, reason: Any, details: Optional[BaseException] = None):
        super().__init__(f"{self.prefix}: {reason}")
        self.details = details

    @classmethod
    def wrap(cls, exc: BaseException) -> "GpxProcessingError":
        """Build a stage error from ``exc`` without losing the original fault."""

        if isinstance(exc, cls):
            return exc
        return cls(str(exc) or exc.__class__.__name__, details=exc)


class ParseError(GpxProcessingError):
    """Raised when a buffer is not a readable GPX document."""

    code = "PARSE_ERROR"
    prefix = "Failed to parse GPX file"


class MatchError(GpxProcessingError):
    """Raised when a point sequence cannot be matched to the road network."""

    code = "MATCH_ERROR"
    prefix = "Failed to match route to roads"


class SurfaceError(GpxProcessingError):
    """Raised when surface detection fails for a matched route."""

    code = "SURFACE_ERROR"
    prefix = "Failed to detect surfaces"


class ElevationError(GpxProcessingError):
    """Raised when elevation statistics cannot be computed."""

    code = "ELEVATION_ERROR"
    prefix = "Failed to process elevation data"


__all__ = [
    "GpxProcessingError",
    "ParseError",
    "MatchError",
    "SurfaceError",
    "ElevationError",
]
