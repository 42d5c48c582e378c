from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from venue_pricing.core.domain.quotes import (
    DEFAULT_SOURCES,
    OVERRIDE_SOURCES,
    Breakdown,
    CapacitySummary,
    PriceSummary,
    SegmentSource,
)

if TYPE_CHECKING:
    from venue_pricing.core.domain.quotes import CapacitySegment, PriceSegment


# ---------------------------------------------------------------------------
# Breakdown
# ---------------------------------------------------------------------------

def build_breakdown(sources: Sequence[SegmentSource]) -> Breakdown:
    default_segments = sum(1 for s in sources if s in DEFAULT_SOURCES)
    override_segments = sum(1 for s in sources if s in OVERRIDE_SOURCES)
    surge_segments = sum(1 for s in sources if s is SegmentSource.SURGE)

    return Breakdown(
        sheet_segments=len(sources) - default_segments - override_segments,
        default_segments=default_segments,
        override_segments=override_segments,
        surge_segments=surge_segments,
    )


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def summarize_price(segments: Sequence[PriceSegment]) -> PriceSummary:
    total_hours = sum(seg.duration_hours for seg in segments)
    total_price = sum(seg.price_per_hour * seg.duration_hours for seg in segments)

    return PriceSummary(
        total_price=round(total_price, 2),
        total_hours=total_hours,
    )


def summarize_capacity(segments: Sequence[CapacitySegment]) -> CapacitySummary:
    total_hours = sum(seg.duration_hours for seg in segments)

    def weighted(attr: str) -> float:
        if total_hours <= 0:
            return 0.0
        total = sum(getattr(seg, attr) * seg.duration_hours for seg in segments)
        return round(total / total_hours, 2)

    return CapacitySummary(
        total_hours=total_hours,
        avg_min_capacity=weighted("min_capacity"),
        avg_max_capacity=weighted("max_capacity"),
        avg_default_capacity=weighted("default_capacity"),
        avg_allocated_capacity=weighted("allocated_capacity"),
        avg_available_capacity=weighted("available_capacity"),
    )
