"""
Semantic test: hourly override table editing.

Invariant:
Edits never mutate the input table; results are sorted by (date, hour).
Setting an existing slot merges only the given fields. Hours outside
0..23 are rejected.
"""

from __future__ import annotations

from datetime import date

import pytest

from venue_pricing.authoring.overrides import (
    find_hourly_override,
    is_daily_override_pattern,
    overrides_for_date,
    remove_hourly_override,
    remove_overrides_for_date,
    set_daily_override,
    set_hourly_override,
)
from venue_pricing.core.domain.types import HourlyOverride

DAY = date(2026, 1, 15)
NEXT_DAY = date(2026, 1, 16)


def test_set_inserts_sorted_and_returns_new_table() -> None:
    original = (HourlyOverride(date=NEXT_DAY, hour=9, max=10),)

    table = set_hourly_override(original, DAY, 14, max=50)
    table = set_hourly_override(table, DAY, 8, max=20)

    assert [(o.date, o.hour) for o in table] == [(DAY, 8), (DAY, 14), (NEXT_DAY, 9)]
    assert original == (HourlyOverride(date=NEXT_DAY, hour=9, max=10),)


def test_set_merges_existing_slot() -> None:
    table = set_hourly_override((), DAY, 10, max=40, allocated=5)
    table = set_hourly_override(table, DAY, 10, min=2)

    assert len(table) == 1
    merged = table[0]
    assert (merged.min, merged.max, merged.allocated, merged.default) == (2, 40, 5, None)


@pytest.mark.parametrize("hour", [-1, 24])
def test_set_rejects_hour_out_of_range(hour: int) -> None:
    with pytest.raises(ValueError):
        set_hourly_override((), DAY, hour, max=10)


def test_set_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        set_hourly_override((), DAY, 10, capacity=10)


def test_remove_helpers() -> None:
    table = set_hourly_override((), DAY, 10, max=40)
    table = set_hourly_override(table, DAY, 11, max=40)
    table = set_hourly_override(table, NEXT_DAY, 10, max=40)

    assert [(o.date, o.hour) for o in remove_hourly_override(table, DAY, 10)] == [
        (DAY, 11),
        (NEXT_DAY, 10),
    ]
    assert [(o.date, o.hour) for o in remove_overrides_for_date(table, DAY)] == [(NEXT_DAY, 10)]
    assert len(table) == 3


def test_lookup_helpers() -> None:
    table = (
        HourlyOverride(date=DAY, hour=15, max=1),
        HourlyOverride(date=DAY, hour=3, max=2),
        HourlyOverride(date=NEXT_DAY, hour=0, max=3),
    )

    assert [o.hour for o in overrides_for_date(table, DAY)] == [3, 15]
    found = find_hourly_override(table, DAY, 15)
    assert found is not None and found.max == 1
    assert find_hourly_override(table, DAY, 4) is None


def test_daily_pattern_detection() -> None:
    table = set_daily_override((), DAY, max=30)

    assert len(table) == 24
    assert is_daily_override_pattern(table, DAY)
    assert not is_daily_override_pattern(table, NEXT_DAY)

    edited = set_hourly_override(table, DAY, 12, max=31)
    assert not is_daily_override_pattern(edited, DAY)

    partial = remove_hourly_override(table, DAY, 23)
    assert not is_daily_override_pattern(partial, DAY)
