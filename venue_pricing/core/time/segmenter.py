"""
Booking span segmentation.

This module splits a booking span into calendar-hour-aligned slots. Slot
boundaries are absolute (UTC hour marks); the booking timezone only matters
later, when a slot start is matched against clock-time windows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from venue_pricing.core.time.clock import as_utc

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True, slots=True)
class HourSlot:
    """
    One contiguous piece of a booking that never crosses an hour mark.
    """

    start: datetime
    end: datetime
    duration_hours: float


def split_into_hourly_slots(start: datetime, end: datetime) -> list[HourSlot]:
    """
    Split ``[start, end)`` into ordered, contiguous hour slots.

    Interior boundaries fall on ``:00`` of each hour; the first and last
    slots may be fractional. The slots union exactly to ``[start, end)``.
    """

    current = as_utc(start)
    stop = as_utc(end)

    if current >= stop:
        raise ValueError("booking start must be before booking end")

    slots: list[HourSlot] = []

    while current < stop:
        next_hour = current.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        slot_end = min(next_hour, stop)

        slots.append(
            HourSlot(
                start=current,
                end=slot_end,
                duration_hours=(slot_end - current).total_seconds() / SECONDS_PER_HOUR,
            )
        )

        current = slot_end

    return slots
