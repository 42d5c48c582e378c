"""
Window matching for a single instant.

Two addressing schemes are supported:
- ABSOLUTE_TIME: wall-clock ``[start, end)`` in the given zone, with
  overnight wraparound when ``end < start``
- DURATION_BASED: ``[start_minute, end_minute)`` counted from a reference
  instant (the owning sheet's ``effective_from``)

The caller picks the zone: booking-local for ordinary sheets, UTC for
surge multiplier sheets.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import TYPE_CHECKING

from venue_pricing.core.domain.types import AbsoluteWindow, DurationWindow
from venue_pricing.core.time.clock import day_of_week, hhmm_to_minutes, minute_of_day

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo


def clock_range_contains(start_minutes: int, end_minutes: int, minutes: int) -> bool:
    """Return True if ``minutes`` lies in the clock range ``[start, end)``.

    An empty range (start == end) never matches.
    """
    if start_minutes == end_minutes:
        return False
    if end_minutes < start_minutes:
        # overnight, e.g. 23:00-01:00
        return minutes >= start_minutes or minutes < end_minutes
    return start_minutes <= minutes < end_minutes


def minutes_from_reference(instant: datetime, reference: datetime) -> int:
    """Whole minutes elapsed from ``reference`` to ``instant`` (floored)."""
    return math.floor((instant - reference).total_seconds() / 60.0)


def window_matches(
    window: AbsoluteWindow | DurationWindow,
    instant: datetime,
    *,
    reference: datetime,
    tz: ZoneInfo,
) -> bool:
    """Return True if ``window`` matches ``instant``.

    ``days_of_week`` (0=Sunday) is checked first, on the same clock as the
    time comparison; a missing filter matches every day and an empty one
    matches none.
    """

    if window.days_of_week is not None and day_of_week(instant, tz) not in window.days_of_week:
        return False

    if isinstance(window, DurationWindow):
        elapsed = minutes_from_reference(instant, reference)
        return window.start_minute <= elapsed < window.end_minute

    return clock_range_contains(
        hhmm_to_minutes(window.start_time),
        hhmm_to_minutes(window.end_time),
        minute_of_day(instant, tz),
    )
