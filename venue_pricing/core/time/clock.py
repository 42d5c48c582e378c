"""
Clock helpers.

Small conversions between absolute instants and local wall-clock values.
HH:MM strings are assumed well-formed; they are validated where rule sheets
enter the system, not here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

UTC_ZONE = ZoneInfo("UTC")


@lru_cache(maxsize=64)
def resolve_timezone(name: str) -> ZoneInfo:
    """Return the ZoneInfo for an IANA identifier."""
    return ZoneInfo(name)


def as_utc(instant: datetime) -> datetime:
    """Return ``instant`` in UTC. Naive values are taken to be UTC already."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def hhmm_to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight (``24:00`` -> 1440)."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minute_of_day(instant: datetime, tz: ZoneInfo) -> int:
    """Return the wall-clock minute of day of ``instant`` in ``tz``."""
    local = instant.astimezone(tz)
    return local.hour * 60 + local.minute


def day_of_week(instant: datetime, tz: ZoneInfo) -> int:
    """Return the day of week in ``tz`` with 0=Sunday .. 6=Saturday."""
    # datetime.weekday() is 0=Monday .. 6=Sunday
    return (instant.astimezone(tz).weekday() + 1) % 7


def format_local_hhmm(instant: datetime, tz: ZoneInfo) -> str:
    local = instant.astimezone(tz)
    return f"{local.hour:02d}:{local.minute:02d}"
