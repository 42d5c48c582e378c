"""
Semantic test: hierarchy resolution over a full booking.

Invariant:
For booking 10:00-18:00 with a Location sheet 09:00-17:00 at $75 and a
SubLocation sheet 12:00-14:00 at $130, hours 10-12 and 14-17 resolve to
$75, hours 12-14 to $130 (SubLocation outranks Location), and 17-18
falls back to the entity default cascade.
"""

from __future__ import annotations

from typing import Any

import pytest

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.quotes import SegmentSource
from venue_pricing.core.domain.types import PriceContext
from venue_pricing.core.engines.price_engine import PriceEngine


def mk_rate_sheet(
    sheet_id: str,
    *,
    start_time: str,
    end_time: str,
    value: float,
    priority: int,
    level: str,
) -> dict[str, Any]:
    return {
        "id": sheet_id,
        "name": sheet_id,
        "type": "TIME_BASED",
        "applies_to": {"level": level, "entity_id": f"{level.lower()}-1"},
        "priority": priority,
        "effective_from": "2026-01-01T00:00:00Z",
        "windows": [{"start_time": start_time, "end_time": end_time, "value": value}],
    }


@pytest.fixture()
def context() -> PriceContext:
    return PriceContext.model_validate(
        {
            "booking_start": "2026-01-15T10:00:00-05:00",
            "booking_end": "2026-01-15T18:00:00-05:00",
            "timezone": "America/New_York",
            "location_sheets": [
                mk_rate_sheet(
                    "location-day",
                    start_time="09:00",
                    end_time="17:00",
                    value=75.0,
                    priority=2000,
                    level="LOCATION",
                )
            ],
            "sublocation_sheets": [
                mk_rate_sheet(
                    "sublocation-lunch",
                    start_time="12:00",
                    end_time="14:00",
                    value=130.0,
                    priority=3000,
                    level="SUBLOCATION",
                )
            ],
            "defaults": {"customer": 40.0, "location": 50.0},
        }
    )


def test_hourly_prices_follow_hierarchy(context: PriceContext) -> None:
    quote = PriceEngine().calculate_price(context)

    assert [seg.price_per_hour for seg in quote.segments] == [
        75.0, 75.0, 130.0, 130.0, 75.0, 75.0, 75.0, 50.0,
    ]
    assert [seg.sheet.level if seg.sheet else None for seg in quote.segments] == [
        Level.LOCATION,
        Level.LOCATION,
        Level.SUBLOCATION,
        Level.SUBLOCATION,
        Level.LOCATION,
        Level.LOCATION,
        Level.LOCATION,
        None,
    ]


def test_summary_and_breakdown(context: PriceContext) -> None:
    quote = PriceEngine().calculate_price(context)

    assert quote.summary.total_hours == pytest.approx(8.0)
    assert quote.summary.total_price == pytest.approx(685.0)
    assert quote.breakdown.sheet_segments == 7
    assert quote.breakdown.default_segments == 1
    assert quote.timezone == "America/New_York"


def test_last_hour_uses_location_default(context: PriceContext) -> None:
    quote = PriceEngine().calculate_price(context)
    last = quote.segments[-1]

    assert last.source is SegmentSource.DEFAULT_RATE
    assert last.default_level is Level.LOCATION
    assert last.sheet is None


def test_decision_log_records_every_hour(context: PriceContext) -> None:
    quote = PriceEngine().calculate_price(context)
    log = quote.decision_log

    assert [entry.hour for entry in log] == list(range(1, 9))
    assert log[0].time_slot == "10:00 - 11:00"
    assert log[-1].time_slot == "17:00 - 18:00"

    lunch = log[2]
    assert lunch.source is SegmentSource.RATE_SHEET
    assert lunch.candidate_count == 2
    assert lunch.selected is not None
    assert lunch.selected.name == "sublocation-lunch"
    assert lunch.selected.priority == 3000
    assert lunch.values == {"price_per_hour": 130.0}

    fallback = log[-1]
    assert fallback.candidate_count == 0
    assert fallback.selected is None
    assert "LOCATION default" in fallback.reason


def test_segment_time_window_label(context: PriceContext) -> None:
    quote = PriceEngine().calculate_price(context)

    assert quote.segments[0].time_window == "09:00-17:00"
    assert quote.segments[2].time_window == "12:00-14:00"
    assert quote.segments[-1].time_window is None
