"""
Semantic test: capacity sheets and the capacity default cascade.

Invariant:
Without an override, the winning capacity sheet supplies the whole
bundle for the hour. Without a matching sheet, the first present entity
default (Event -> SubLocation -> Location -> Customer) is used, then the
configured constant bundle (0/100/50/0), which is reported as a warning.
Averages are duration-weighted.
"""

from __future__ import annotations

from typing import Any

import pytest

from venue_pricing.core.config.engine_config import EngineConfig
from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.quotes import SegmentSource
from venue_pricing.core.domain.types import CapacityBundle, CapacityContext
from venue_pricing.core.engines.capacity_engine import CapacityEngine


def mk_bundle(max_capacity: float, allocated: float = 0) -> dict[str, Any]:
    return {"min": 0, "max": max_capacity, "default": max_capacity / 2, "allocated": allocated}


def mk_context(**overrides: Any) -> CapacityContext:
    data: dict[str, Any] = {
        "booking_start": "2026-01-15T10:00:00Z",
        "booking_end": "2026-01-15T11:30:00Z",
        "timezone": "UTC",
    }
    data.update(overrides)
    return CapacityContext.model_validate(data)


def test_event_sheet_outranks_location_sheet() -> None:
    ctx = mk_context(
        location_sheets=[
            {
                "id": "loc",
                "name": "loc",
                "type": "TIME_BASED",
                "priority": 2999,
                "effective_from": "2026-01-01T00:00:00Z",
                "windows": [{"start_time": "00:00", "end_time": "24:00", "value": mk_bundle(300)}],
            }
        ],
        event_sheets=[
            {
                "id": "evt",
                "name": "evt",
                "type": "EVENT_BASED",
                "priority": 4000,
                "effective_from": "2026-01-15T10:00:00Z",
                "effective_to": "2026-01-15T11:00:00Z",
                "event_value": mk_bundle(80, allocated=20),
            }
        ],
    )

    quote = CapacityEngine().calculate_capacity(ctx)
    event_hour, later_hour = quote.segments

    assert event_hour.source is SegmentSource.CAPACITY_SHEET
    assert event_hour.sheet is not None and event_hour.sheet.level is Level.EVENT
    assert event_hour.available_capacity == 60
    assert event_hour.time_window is None

    # effective_to is inclusive, so the slot starting at 11:00 still matches.
    assert later_hour.sheet is not None and later_hour.sheet.level is Level.EVENT


def test_expired_event_sheet_falls_back_to_location_sheet() -> None:
    ctx = mk_context(
        location_sheets=[
            {
                "id": "loc",
                "name": "loc",
                "type": "TIME_BASED",
                "priority": 2999,
                "effective_from": "2026-01-01T00:00:00Z",
                "windows": [{"start_time": "00:00", "end_time": "24:00", "value": mk_bundle(300)}],
            }
        ],
        event_sheets=[
            {
                "id": "evt",
                "name": "evt",
                "type": "EVENT_BASED",
                "priority": 4000,
                "effective_from": "2026-01-15T10:00:00Z",
                "effective_to": "2026-01-15T10:59:00Z",
                "event_value": mk_bundle(80),
            }
        ],
    )

    quote = CapacityEngine().calculate_capacity(ctx)

    assert [s.sheet.level for s in quote.segments if s.sheet] == [Level.EVENT, Level.LOCATION]
    assert quote.segments[1].max_capacity == 300


def test_date_based_sheet_matches_ranges() -> None:
    ctx = mk_context(
        sublocation_sheets=[
            {
                "id": "season",
                "name": "season",
                "type": "DATE_BASED",
                "priority": 3100,
                "effective_from": "2026-01-01T00:00:00Z",
                "date_ranges": [
                    {
                        "start_date": "2026-01-10T00:00:00Z",
                        "end_date": "2026-01-20T00:00:00Z",
                        "value": mk_bundle(500),
                    }
                ],
            }
        ],
    )

    quote = CapacityEngine().calculate_capacity(ctx)

    assert all(s.max_capacity == 500 for s in quote.segments)
    assert quote.breakdown.sheet_segments == 2


def test_defaults_cascade_to_first_present_level() -> None:
    ctx = mk_context(defaults={"customer": mk_bundle(40), "location": mk_bundle(60)})

    quote = CapacityEngine().calculate_capacity(ctx)

    assert all(s.source is SegmentSource.DEFAULT_CAPACITY for s in quote.segments)
    assert all(s.default_level is Level.LOCATION for s in quote.segments)
    assert all(s.max_capacity == 60 for s in quote.segments)
    assert quote.warnings == []


def test_constant_fallback_bundle_is_warned() -> None:
    quote = CapacityEngine().calculate_capacity(mk_context())
    seg = quote.segments[0]

    assert (seg.min_capacity, seg.max_capacity, seg.default_capacity, seg.allocated_capacity) == (
        0,
        100,
        50,
        0,
    )
    assert seg.default_level is None
    assert len(quote.warnings) == 1


def test_configured_fallback_bundle() -> None:
    engine = CapacityEngine(
        EngineConfig(fallback_capacity=CapacityBundle(min=0, max=10, default=5))
    )

    quote = engine.calculate_capacity(mk_context())

    assert quote.summary.avg_max_capacity == 10


def test_averages_are_duration_weighted() -> None:
    ctx = mk_context(
        sublocation_sheets=[
            {
                "id": "morning",
                "name": "morning",
                "type": "TIME_BASED",
                "priority": 3000,
                "effective_from": "2026-01-01T00:00:00Z",
                "windows": [
                    {"start_time": "10:00", "end_time": "11:00", "value": mk_bundle(90)},
                    {"start_time": "11:00", "end_time": "12:00", "value": mk_bundle(30)},
                ],
            }
        ],
    )

    summary = CapacityEngine().calculate_capacity(ctx).summary

    # (90 * 1.0 + 30 * 0.5) / 1.5
    assert summary.total_hours == pytest.approx(1.5)
    assert summary.avg_max_capacity == 70.0
