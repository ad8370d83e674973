"""
Minute-of-day helpers.

Every time of day read from the store ("HH:MM" or "HH:MM:SS") is converted
to an integer number of minutes since midnight before any interval math,
and only formatted back to "HH:MM" when a slot is written to a response.
"""
import re

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


def time_to_minutes(value: str) -> int:
    """
    Parse a 24-hour "HH:MM" string into minutes since midnight.

    A trailing ":SS" (as Postgres renders time columns) is accepted and
    ignored. Raises ValueError on anything else.
    """
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {value!r}")

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open overlap: ranges that only touch at an endpoint do not overlap."""
    return a_start < b_end and a_end > b_start
