"""Hourly capacity resolution engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.quotes import (
    CapacityQuote,
    CapacitySegment,
    DecisionLogEntry,
    SegmentSource,
    SheetRef,
)
from venue_pricing.core.domain.types import CapacityBundle
from venue_pricing.core.engines.engine_base import (
    FALLBACK_REASON,
    HourlyEngine,
    sheet_ref,
    winner_reason,
)
from venue_pricing.core.resolution.aggregator import build_breakdown, summarize_capacity
from venue_pricing.core.resolution.candidates import find_candidates
from venue_pricing.core.resolution.defaults import resolve_default_capacity
from venue_pricing.core.resolution.overrides import (
    apply_override,
    index_overrides,
    is_daily_override_pattern,
)
from venue_pricing.core.resolution.priority import select_winner
from venue_pricing.core.time.segmenter import split_into_hourly_slots

if TYPE_CHECKING:
    from venue_pricing.core.domain.types import CapacityContext, HourlyOverride
    from venue_pricing.core.resolution.candidates import Candidate
    from venue_pricing.core.time.segmenter import HourSlot

LOGGER = logging.getLogger(__name__)

# Overrides outrank every sheet; the table belongs to the sublocation.
OVERRIDE_PRIORITY = 999_999


def override_ref(source: SegmentSource) -> SheetRef:
    """Winner reference recorded for an hour settled by the override table."""
    daily = source is SegmentSource.DAILY_OVERRIDE
    return SheetRef(
        id="daily-override" if daily else "hourly-override",
        name="Daily override" if daily else "Hourly override",
        type=source.value,
        priority=OVERRIDE_PRIORITY,
        level=Level.SUBLOCATION,
    )


@dataclass(frozen=True, slots=True)
class _HourCapacity:
    bundle: CapacityBundle
    source: SegmentSource
    reason: str
    selected: SheetRef | None = None
    time_window: str | None = None
    default_level: Level | None = None


class CapacityEngine(HourlyEngine):
    """Resolves hourly min/max/default/allocated capacity of a booking span.

    Precedence per hour: an hourly override for the local (date, hour),
    then the winning capacity sheet, then the entity default cascade.
    """

    engine_name = "capacity"

    # pylint: disable=too-many-locals
    def calculate_capacity(self, context: CapacityContext) -> CapacityQuote:
        tz, surge_tz = self._clocks(context)
        sheets_by_level = context.sheets_by_level()

        override_index = index_overrides(context.hourly_overrides)
        daily_pattern: dict[date, bool] = {}

        segments: list[CapacitySegment] = []
        decision_log: list[DecisionLogEntry] = []

        for index, slot in enumerate(
            split_into_hourly_slots(context.booking_start, context.booking_end), start=1
        ):
            local_start = slot.start.astimezone(tz)
            override = override_index.get((local_start.date(), local_start.hour))

            if override is not None:
                day = override.date
                if day not in daily_pattern:
                    daily_pattern[day] = is_daily_override_pattern(context.hourly_overrides, day)
                candidate_count = 0
                hour = self._override_hour(override, context, daily=daily_pattern[day])
            else:
                candidates = find_candidates(
                    slot.start,
                    sheets_by_level,
                    tz=tz,
                    surge_tz=surge_tz,
                )
                candidate_count = len(candidates)
                hour = self._sheet_or_default_hour(candidates, context)

            LOGGER.debug(
                "Hour slot resolved",
                extra={
                    "hour": index,
                    "slot_start": slot.start.isoformat(),
                    "candidates": candidate_count,
                    "source": hour.source.value,
                    "max_capacity": hour.bundle.max,
                },
            )

            segments.append(self._segment(slot, hour))
            decision_log.append(
                DecisionLogEntry(
                    hour=index,
                    timestamp=slot.start,
                    time_slot=self._time_slot_label(slot, tz),
                    candidate_count=candidate_count,
                    source=hour.source,
                    reason=hour.reason,
                    selected=hour.selected,
                    values=_bundle_values(hour.bundle),
                )
            )

        breakdown = build_breakdown([seg.source for seg in segments])
        summary = summarize_capacity(segments)

        warnings = self.config.priority_range_warnings(sheets_by_level)
        warnings.extend(self._fallback_warning(decision_log, "capacity"))

        self._emit_resolved(
            context=context,
            breakdown=breakdown,
            decision_log=decision_log,
            total_hours=summary.total_hours,
            warnings=warnings,
        )

        return CapacityQuote(
            segments=segments,
            summary=summary,
            breakdown=breakdown,
            decision_log=decision_log,
            timezone=context.timezone,
            warnings=warnings,
        )

    # ---------------------------------------------------------------------
    # Per-hour resolution
    # ---------------------------------------------------------------------

    def _override_hour(
        self,
        override: HourlyOverride,
        context: CapacityContext,
        *,
        daily: bool,
    ) -> _HourCapacity:
        # Fields the override leaves unset come from the default cascade.
        base = resolve_default_capacity(context.defaults, fallback=self.config.fallback_capacity)
        kind = "daily" if daily else "hourly"
        source = SegmentSource.DAILY_OVERRIDE if daily else SegmentSource.HOURLY_OVERRIDE

        return _HourCapacity(
            bundle=apply_override(override, base.value),
            source=source,
            selected=override_ref(source),
            reason=f"{kind} override for {override.date.isoformat()} {override.hour:02d}:00",
        )

    def _sheet_or_default_hour(
        self,
        candidates: list[Candidate],
        context: CapacityContext,
    ) -> _HourCapacity:
        winner = select_winner(candidates)

        if winner is not None:
            return _HourCapacity(
                bundle=winner.value,
                source=SegmentSource.CAPACITY_SHEET,
                reason=winner_reason(winner),
                selected=sheet_ref(winner),
                time_window=winner.time_window,
            )

        default = resolve_default_capacity(context.defaults, fallback=self.config.fallback_capacity)
        if default.is_constant_fallback:
            reason = FALLBACK_REASON
        else:
            reason = f"no rule sheet matched, {default.level.value} default"

        return _HourCapacity(
            bundle=default.value,
            source=SegmentSource.DEFAULT_CAPACITY,
            reason=reason,
            default_level=default.level,
        )

    # ---------------------------------------------------------------------
    # Output records
    # ---------------------------------------------------------------------

    @staticmethod
    def _segment(slot: HourSlot, hour: _HourCapacity) -> CapacitySegment:
        bundle = hour.bundle
        return CapacitySegment(
            start_time=slot.start,
            end_time=slot.end,
            duration_hours=slot.duration_hours,
            min_capacity=bundle.min,
            max_capacity=bundle.max,
            default_capacity=bundle.default,
            allocated_capacity=bundle.allocated,
            available_capacity=bundle.available,
            source=hour.source,
            sheet=hour.selected,
            time_window=hour.time_window,
            default_level=hour.default_level,
        )


def _bundle_values(bundle: CapacityBundle) -> dict[str, float]:
    return {
        "min_capacity": bundle.min,
        "max_capacity": bundle.max,
        "default_capacity": bundle.default,
        "allocated_capacity": bundle.allocated,
        "available_capacity": bundle.available,
    }
