"""
Semantic test: overnight absolute windows wrap around midnight.

Invariant:
A window with end < start (e.g. 23:00-01:00) matches minutes >= start or
< end on the local clock of the booking timezone. An empty window
(start == end) never matches.
"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from venue_pricing.core.domain.types import AbsoluteWindow
from venue_pricing.core.resolution.window_matcher import clock_range_contains, window_matches

UTC = timezone.utc
REFERENCE = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [
        (23 * 60, True),
        (23 * 60 + 30, True),
        (0, True),
        (30, True),
        (60, False),
        (22 * 60 + 59, False),
        (12 * 60, False),
    ],
)
def test_overnight_clock_range(minutes: int, expected: bool) -> None:
    assert clock_range_contains(23 * 60, 60, minutes) is expected


def test_same_day_range_is_half_open() -> None:
    assert clock_range_contains(9 * 60, 17 * 60, 9 * 60)
    assert clock_range_contains(9 * 60, 17 * 60, 16 * 60 + 59)
    assert not clock_range_contains(9 * 60, 17 * 60, 17 * 60)


def test_empty_range_never_matches() -> None:
    assert not clock_range_contains(600, 600, 600)
    assert not clock_range_contains(0, 0, 0)


def test_end_of_day_marker_covers_last_minute() -> None:
    assert clock_range_contains(0, 24 * 60, 23 * 60 + 59)


def test_overnight_window_uses_booking_local_clock() -> None:
    window = AbsoluteWindow[float](start_time="23:00", end_time="01:00", value=60.0)
    new_york = ZoneInfo("America/New_York")

    # 04:30Z is 23:30 EST.
    assert window_matches(
        window,
        datetime(2026, 1, 15, 4, 30, tzinfo=UTC),
        reference=REFERENCE,
        tz=new_york,
    )
    # 05:30Z is 00:30 EST.
    assert window_matches(
        window,
        datetime(2026, 1, 15, 5, 30, tzinfo=UTC),
        reference=REFERENCE,
        tz=new_york,
    )
    # 23:30Z is 18:30 EST.
    assert not window_matches(
        window,
        datetime(2026, 1, 15, 23, 30, tzinfo=UTC),
        reference=REFERENCE,
        tz=new_york,
    )
