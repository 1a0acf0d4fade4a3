"""Normalization helpers.

Centralizes defensive parsing of backend values and coordinate checks.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

# Threshold to distinguish epoch seconds from milliseconds.
_MS_THRESHOLD = 1e11


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def parse_fix_timestamp(value: Any) -> datetime | None:
    """Convert a fix timestamp to an aware UTC datetime.

    Accepts datetimes, ISO 8601 strings (a trailing ``Z`` included) and
    epoch numbers in seconds or milliseconds.  Anything else is ``None``.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = safe_float(value)
        if ts is None or not math.isfinite(ts) or ts <= 0:
            return None
        if ts > _MS_THRESHOLD:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=UTC)
        except (OverflowError, ValueError, OSError):
            return None
    if isinstance(value, str):
        text = value.strip()
        numeric = safe_float(text)
        if numeric is not None:
            return parse_fix_timestamp(numeric)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return None


def is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    """Return True when *lat*/*lon* can be placed on the map.

    Both must be finite, with ``lat`` in [-90, 90] and ``lon`` in [-180, 180].
    """
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
