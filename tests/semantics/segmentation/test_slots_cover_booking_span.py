"""
Semantic test: hour slots exactly cover the booking span.

Invariant:
Slots are ordered and contiguous, interior boundaries fall on :00, the
first slot starts at booking start, the last ends at booking end, and
the durations sum to the booking length in hours.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from venue_pricing.core.time.segmenter import split_into_hourly_slots

UTC = timezone.utc


def test_fractional_edges_and_contiguity() -> None:
    start = datetime(2026, 1, 15, 10, 15, tzinfo=UTC)
    end = datetime(2026, 1, 15, 13, 30, tzinfo=UTC)

    slots = split_into_hourly_slots(start, end)

    assert [s.duration_hours for s in slots] == [0.75, 1.0, 1.0, 0.5]
    assert slots[0].start == start
    assert slots[-1].end == end

    for prev, nxt in zip(slots, slots[1:]):
        assert prev.end == nxt.start
        assert nxt.start.minute == 0 and nxt.start.second == 0

    assert sum(s.duration_hours for s in slots) == pytest.approx(3.25)


def test_sub_hour_booking_is_one_slot() -> None:
    start = datetime(2026, 1, 15, 10, 10, tzinfo=UTC)
    end = datetime(2026, 1, 15, 10, 25, tzinfo=UTC)

    slots = split_into_hourly_slots(start, end)

    assert len(slots) == 1
    assert slots[0].duration_hours == pytest.approx(0.25)


def test_non_utc_offsets_are_normalized() -> None:
    # 10:00-12:00 at UTC-05:00 is 15:00-17:00 UTC.
    tz = timezone(timedelta(hours=-5))
    slots = split_into_hourly_slots(
        datetime(2026, 1, 15, 10, 0, tzinfo=tz),
        datetime(2026, 1, 15, 12, 0, tzinfo=tz),
    )

    assert [s.start.hour for s in slots] == [15, 16]
    assert all(s.start.tzinfo is not None for s in slots)


@pytest.mark.parametrize("minutes", [0, -30])
def test_empty_or_inverted_span_is_rejected(minutes: int) -> None:
    start = datetime(2026, 1, 15, 10, 0, tzinfo=UTC)

    with pytest.raises(ValueError):
        split_into_hourly_slots(start, start + timedelta(minutes=minutes))
