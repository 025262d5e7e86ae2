"""Parsing and formatting of human-readable durations."""

import math
import re

SECOND = 1.0
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = 365.25 * DAY

UNITS: dict[str, float] = {
    "ms": 0.001,
    "msec": 0.001,
    "msecs": 0.001,
    "millisecond": 0.001,
    "milliseconds": 0.001,
    "s": SECOND,
    "sec": SECOND,
    "secs": SECOND,
    "second": SECOND,
    "seconds": SECOND,
    "m": MINUTE,
    "min": MINUTE,
    "mins": MINUTE,
    "minute": MINUTE,
    "minutes": MINUTE,
    "h": HOUR,
    "hr": HOUR,
    "hrs": HOUR,
    "hour": HOUR,
    "hours": HOUR,
    "d": DAY,
    "day": DAY,
    "days": DAY,
    "w": WEEK,
    "week": WEEK,
    "weeks": WEEK,
    "y": YEAR,
    "yr": YEAR,
    "yrs": YEAR,
    "year": YEAR,
    "years": YEAR,
}

DISABLED = frozenset({"inf", "infinity", "none"})

DURATION_PATTERN = re.compile(
    r"^(?P<value>\d+(?:\.\d+)?|\.\d+)\s*(?P<unit>[a-z]+)?$", re.IGNORECASE
)


def parse_duration(value: str | float | None) -> float | None:
    """Parse a duration into seconds.

    Args:
        value: A duration such as "20 seconds", "5m" or "250ms", a number of
            seconds, or one of None, math.inf and "infinity" to disable it.

    Returns:
        The duration in seconds, or None when the duration is disabled.

    Raises:
        ValueError: If the value cannot be parsed.

    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    if isinstance(value, int | float):
        if math.isinf(value) and value > 0:
            return None
        if math.isnan(value) or value < 0:
            raise ValueError(f"Invalid duration: {value!r}")
        return float(value)

    text = value.strip()
    if text.lower() in DISABLED:
        return None

    if (match := DURATION_PATTERN.match(text)) is None:
        raise ValueError(f"Invalid duration: {value!r}")

    unit = (match["unit"] or "s").lower()
    if unit not in UNITS:
        raise ValueError(f"Unknown duration unit {match['unit']!r} in {value!r}")

    return float(match["value"]) * UNITS[unit]


def format_duration(seconds: float) -> str:
    """Format seconds in the short form used in reports (e.g. "2s", "350ms")."""
    magnitude = abs(seconds)
    for unit_seconds, suffix in ((DAY, "d"), (HOUR, "h"), (MINUTE, "m"), (SECOND, "s")):
        if magnitude >= unit_seconds:
            return f"{round(seconds / unit_seconds)}{suffix}"
    return f"{round(seconds * 1000)}ms"
