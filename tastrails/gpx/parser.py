"""GPX parsing stage.

Turns a raw upload buffer into :class:`~tastrails.models.TrackData`. All
tracks and segments are flattened into one point sequence in document order.
"""

from __future__ import annotations

import codecs
import io
import logging
import re
from typing import List, Optional

from defusedxml import ElementTree as ET
import gpxpy
import gpxpy.gpx

from ..errors import ParseError
from ..models import Point, TrackData, TrackMetadata

LOGGER = logging.getLogger(__name__)

_XML_DECLARATION = re.compile(rb"^(?:\xef\xbb\xbf)?\s*<\?xml[^>]*\?>")
_DECLARED_ENCODING = re.compile(rb"""encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")


def parse_gpx(buffer: bytes) -> TrackData:
    """Parse GPX content into structured track data.

    Args:
        buffer: GPX file content as bytes.

    Returns:
        TrackData holding every track point plus first-track and document
        metadata.

    Raises:
        ParseError: If the buffer is not a readable GPX document, its root
            element is not ``<gpx>``, or a track point lacks a valid
            latitude/longitude.
    """
    if not buffer:
        raise ParseError("empty buffer")
    data = bytes(buffer)
    try:
        text = _decode(data)
        root = _root_name(text)
        if root.lower() != "gpx":
            raise ParseError(f"document root is not <gpx> (found <{root}>)")
        gpx = gpxpy.parse(text)
        points = _collect_points(gpx)
    except ParseError:
        raise
    except Exception as exc:
        LOGGER.error("Failed to parse GPX: %s", exc)
        raise ParseError.wrap(exc) from exc

    first_track = gpx.tracks[0] if gpx.tracks else None
    track = TrackData(
        points=tuple(points),
        name=first_track.name if first_track else None,
        description=first_track.description if first_track else None,
        metadata=TrackMetadata(recorded_at=gpx.time, creator=gpx.creator),
    )
    LOGGER.debug(
        "Parsed GPX name=%r tracks=%d points=%d",
        track.name,
        len(gpx.tracks),
        len(track.points),
    )
    return track


def _collect_points(gpx: gpxpy.gpx.GPX) -> List[Point]:
    points: List[Point] = []
    for track_no, track in enumerate(gpx.tracks):
        for segment_no, segment in enumerate(track.segments):
            for point_no, trkpt in enumerate(segment.points):
                location = f"track {track_no} segment {segment_no} point {point_no}"
                points.append(_to_point(trkpt, location))
    return points


def _to_point(trkpt: gpxpy.gpx.GPXTrackPoint, location: str) -> Point:
    latitude = _coordinate(trkpt.latitude, "latitude", location)
    longitude = _coordinate(trkpt.longitude, "longitude", location)
    try:
        return Point(
            latitude=latitude,
            longitude=longitude,
            elevation=trkpt.elevation,
            timestamp=trkpt.time,
        )
    except ValueError as exc:
        raise ParseError(f"{location}: {exc}", details=exc) from exc


def _coordinate(value: Optional[object], name: str, location: str) -> float:
    if value is None:
        raise ParseError(f"{location} is missing its {name}")
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{location} has a non-numeric {name}: {value!r}", details=exc) from exc


def _root_name(text: str) -> str:
    """Return the local name of the document element, reading only up to it."""

    for _, element in ET.iterparse(io.StringIO(text), events=("start",)):
        return element.tag.rsplit("}", 1)[-1]
    raise ParseError("document has no root element")


def _decode(data: bytes) -> str:
    """Decode with the declared codec and drop the declaration for gpxpy."""

    encoding = "utf-8"
    declaration = _XML_DECLARATION.match(data)
    if declaration:
        declared = _DECLARED_ENCODING.search(declaration.group(0))
        if declared:
            try:
                encoding = codecs.lookup(declared.group(1).decode("ascii")).name
            except LookupError:
                LOGGER.warning(
                    "Unknown XML encoding %r, decoding as UTF-8", declared.group(1)
                )
        data = data[declaration.end():]
    text = data.decode(encoding, errors="replace")
    return text.lstrip("\ufeff")
