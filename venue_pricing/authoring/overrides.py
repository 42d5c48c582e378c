"""
Editing helpers for a sublocation's hourly capacity override table.

Tables are immutable tuples of ``HourlyOverride``; every helper returns a
new tuple sorted by ``(date, hour)`` and leaves its input untouched.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from venue_pricing.core.domain.types import HourlyOverride
from venue_pricing.core.resolution.overrides import (
    HOURS_PER_DAY,
    find_hourly_override,
    is_daily_override_pattern,
)

__all__ = [
    "find_hourly_override",
    "is_daily_override_pattern",
    "overrides_for_date",
    "remove_hourly_override",
    "remove_overrides_for_date",
    "set_daily_override",
    "set_hourly_override",
]

_CAPACITY_FIELDS = ("min", "max", "default", "allocated")


def _sorted(overrides: Iterable[HourlyOverride]) -> tuple[HourlyOverride, ...]:
    return tuple(sorted(overrides, key=lambda o: (o.date, o.hour)))


def set_hourly_override(
    overrides: Iterable[HourlyOverride],
    day: date,
    hour: int,
    **values: float | None,
) -> tuple[HourlyOverride, ...]:
    """Set capacity fields for ``(day, hour)``.

    An existing record for the slot is merged: only the fields passed in
    ``values`` change. Raises ValueError for an hour outside 0..23 or an
    unknown field name.
    """

    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be between 0 and 23, got {hour}")

    unknown = set(values) - set(_CAPACITY_FIELDS)
    if unknown:
        raise ValueError(f"unknown override fields: {sorted(unknown)}")

    updated: list[HourlyOverride] = []
    merged = False

    for override in overrides:
        if override.date == day and override.hour == hour:
            updated.append(HourlyOverride.model_validate({**override.model_dump(), **values}))
            merged = True
        else:
            updated.append(override)

    if not merged:
        updated.append(HourlyOverride(date=day, hour=hour, **values))

    return _sorted(updated)


def set_daily_override(
    overrides: Iterable[HourlyOverride],
    day: date,
    **values: float | None,
) -> tuple[HourlyOverride, ...]:
    """Apply the same values to every hour of ``day``."""
    table = tuple(overrides)
    for hour in range(HOURS_PER_DAY):
        table = set_hourly_override(table, day, hour, **values)
    return table


def remove_hourly_override(
    overrides: Iterable[HourlyOverride],
    day: date,
    hour: int,
) -> tuple[HourlyOverride, ...]:
    return _sorted(o for o in overrides if not (o.date == day and o.hour == hour))


def remove_overrides_for_date(
    overrides: Iterable[HourlyOverride],
    day: date,
) -> tuple[HourlyOverride, ...]:
    return _sorted(o for o in overrides if o.date != day)


def overrides_for_date(
    overrides: Iterable[HourlyOverride],
    day: date,
) -> tuple[HourlyOverride, ...]:
    """Return the overrides of ``day`` ordered by hour."""
    return tuple(sorted((o for o in overrides if o.date == day), key=lambda o: o.hour))
