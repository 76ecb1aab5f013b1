"""Normalization helpers.

Provider values arrive as strings, numbers or null; these helpers never raise.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime
from typing import Any

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def leading_int(value: Any) -> int | None:
    """Parse the integer a string starts with (``"10000 United States Dollar"`` → 10000).

    Returns ``None`` when the value does not start with digits.
    """
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else int(value)
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 provider timestamp into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Format a datetime the way the provider does (second precision, ``Z`` suffix)."""
    return value.astimezone(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def normalize_name(value: str) -> str:
    """Case-fold and trim a team name for comparisons."""
    return " ".join(value.split()).casefold()
