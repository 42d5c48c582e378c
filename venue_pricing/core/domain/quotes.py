"""
Resolution output models.

Quotes are produced fresh per call and never persisted by the engines.
They are plain frozen dataclasses (not part of the input schema);
``to_json_obj()`` gives the JSON-compatible form handed to callers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from venue_pricing.core.domain.levels import Level


class SegmentSource(str, Enum):
    RATE_SHEET = "RATESHEET"
    SURGE = "SURGE"
    DEFAULT_RATE = "DEFAULT_RATE"
    CAPACITY_SHEET = "CAPACITYSHEET"
    HOURLY_OVERRIDE = "HOURLY_OVERRIDE"
    DAILY_OVERRIDE = "DAILY_OVERRIDE"
    DEFAULT_CAPACITY = "DEFAULT_CAPACITY"


DEFAULT_SOURCES: frozenset[SegmentSource] = frozenset(
    {SegmentSource.DEFAULT_RATE, SegmentSource.DEFAULT_CAPACITY}
)
OVERRIDE_SOURCES: frozenset[SegmentSource] = frozenset(
    {SegmentSource.HOURLY_OVERRIDE, SegmentSource.DAILY_OVERRIDE}
)


@dataclass(frozen=True, slots=True)
class SheetRef:
    id: str
    name: str
    type: str
    priority: int
    level: Level


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PriceSegment:
    """Resolved price for one hour slot.

    base_price_per_hour / surge_multiplier are set only when a surge
    multiplier applied; default_level only for DEFAULT_RATE segments.
    """

    start_time: datetime
    end_time: datetime
    duration_hours: float
    price_per_hour: float
    total_price: float
    source: SegmentSource
    sheet: SheetRef | None = None
    time_window: str | None = None
    base_price_per_hour: float | None = None
    surge_multiplier: float | None = None
    default_level: Level | None = None


@dataclass(frozen=True, slots=True)
class CapacitySegment:
    start_time: datetime
    end_time: datetime
    duration_hours: float
    min_capacity: float
    max_capacity: float
    default_capacity: float
    allocated_capacity: float
    available_capacity: float
    source: SegmentSource
    sheet: SheetRef | None = None
    time_window: str | None = None
    default_level: Level | None = None


# ---------------------------------------------------------------------------
# Decision log
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DecisionLogEntry:
    """Audit record for one hour slot.

    - hour: 1-based slot index within the booking
    - candidate_count: number of rule sheets that matched the slot
    - selected: winning sheet (or override), None for defaults
    - values: resolved numbers, e.g. {"price_per_hour": 75.0}
    """

    hour: int
    timestamp: datetime
    time_slot: str
    candidate_count: int
    source: SegmentSource
    reason: str
    selected: SheetRef | None
    values: dict[str, float] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Breakdown:
    sheet_segments: int
    default_segments: int
    override_segments: int = 0
    surge_segments: int = 0


@dataclass(frozen=True, slots=True)
class PriceSummary:
    total_price: float
    total_hours: float


@dataclass(frozen=True, slots=True)
class CapacitySummary:
    total_hours: float
    avg_min_capacity: float
    avg_max_capacity: float
    avg_default_capacity: float
    avg_allocated_capacity: float
    avg_available_capacity: float


@dataclass(frozen=True, slots=True)
class PriceQuote:
    segments: list[PriceSegment]
    summary: PriceSummary
    breakdown: Breakdown
    decision_log: list[DecisionLogEntry]
    timezone: str
    warnings: list[str]

    def to_json_obj(self) -> dict[str, Any]:
        return _jsonify(asdict(self))


@dataclass(frozen=True, slots=True)
class CapacityQuote:
    segments: list[CapacitySegment]
    summary: CapacitySummary
    breakdown: Breakdown
    decision_log: list[DecisionLogEntry]
    timezone: str
    warnings: list[str]

    def to_json_obj(self) -> dict[str, Any]:
        return _jsonify(asdict(self))


def _jsonify(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
