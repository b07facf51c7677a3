"""General utility helpers shared across modules."""

from __future__ import annotations

import json
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
import math
from typing import Any, Optional


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    """Return ``value`` as ISO-8601 text, passing ``None`` through."""

    return value.isoformat() if value is not None else None


def _normalise_value(value: Any) -> Any:
    """Convert objects to JSON-friendly representations."""

    if hasattr(value, "to_dict"):
        return _normalise_value(value.to_dict())
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    if isinstance(value, (list, tuple)):
        return [_normalise_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalise_value(val) for key, val in value.items()}
    return value


def json_dumps(value: Any, *, indent: Optional[int] = 2) -> str:
    """Serialise pipeline values (dataclasses with ``to_dict``) to JSON."""

    return json.dumps(_normalise_value(value), indent=indent)
