"""
Wall-clock helpers.

All shift and check-in decisions use the pharmacy's local time, which is
the UTC clock shifted by ``settings.TIMEZONE_OFFSET`` (e.g. ``+07:00``).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pharmahr.core.config import settings


def parse_offset(tz_offset: str) -> timezone:
    """Turn ``+HH:MM`` / ``-HH:MM`` / ``+HH`` into a fixed-offset timezone."""
    sign = -1 if tz_offset[0] == "-" else 1
    body = tz_offset[1:] if tz_offset[0] in "+-" else tz_offset
    parts = body.split(":")
    hours = int(parts[0])
    minutes = int(parts[1]) if len(parts) > 1 else 0
    return timezone(timedelta(hours=sign * hours, minutes=sign * minutes))


def local_now() -> datetime:
    """Current time in the configured local timezone."""
    return datetime.now(timezone.utc).astimezone(parse_offset(settings.TIMEZONE_OFFSET))


def time_of_day(moment: datetime) -> str:
    return moment.strftime("%H:%M:%S")
