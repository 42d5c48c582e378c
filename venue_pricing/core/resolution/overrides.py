"""
Hourly capacity override lookup.

An override keyed by local ``(date, hour)`` outranks every capacity sheet.
Overrides are read-only here; editing helpers live in
``venue_pricing.authoring.overrides``.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from venue_pricing.core.domain.types import CapacityBundle, HourlyOverride

HOURS_PER_DAY = 24


def index_overrides(
    overrides: Iterable[HourlyOverride],
) -> dict[tuple[date, int], HourlyOverride]:
    """Index overrides by ``(date, hour)``. The first record for a key wins."""
    index: dict[tuple[date, int], HourlyOverride] = {}
    for override in overrides:
        index.setdefault((override.date, override.hour), override)
    return index


def find_hourly_override(
    overrides: Iterable[HourlyOverride],
    day: date,
    hour: int,
) -> HourlyOverride | None:
    for override in overrides:
        if override.date == day and override.hour == hour:
            return override
    return None


def is_daily_override_pattern(overrides: Iterable[HourlyOverride], day: date) -> bool:
    """Return True if ``day`` has exactly 24 overrides sharing one ``max``.

    Such a table was most likely written as a whole-day edit. The
    classification is a display label only; resolution is unchanged.
    """
    for_day = [o for o in overrides if o.date == day]
    if len(for_day) != HOURS_PER_DAY:
        return False

    first_max = for_day[0].max
    if first_max is None:
        return False

    return all(o.max == first_max for o in for_day)


def apply_override(override: HourlyOverride, base: CapacityBundle) -> CapacityBundle:
    """Return ``base`` with every field set on ``override`` replaced."""
    return CapacityBundle(
        min=base.min if override.min is None else override.min,
        max=base.max if override.max is None else override.max,
        default=base.default if override.default is None else override.default,
        allocated=base.allocated if override.allocated is None else override.allocated,
    )
