"""Hourly price resolution engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.quotes import (
    DecisionLogEntry,
    PriceQuote,
    PriceSegment,
    SegmentSource,
)
from venue_pricing.core.domain.types import SheetType
from venue_pricing.core.engines.engine_base import (
    FALLBACK_REASON,
    HourlyEngine,
    sheet_ref,
    winner_reason,
)
from venue_pricing.core.resolution.aggregator import build_breakdown, summarize_price
from venue_pricing.core.resolution.candidates import find_candidates
from venue_pricing.core.resolution.defaults import resolve_default_rate
from venue_pricing.core.resolution.priority import select_winner
from venue_pricing.core.time.segmenter import split_into_hourly_slots

if TYPE_CHECKING:
    from venue_pricing.core.domain.types import PriceContext, RateDefaults
    from venue_pricing.core.resolution.candidates import Candidate
    from venue_pricing.core.resolution.defaults import DefaultResolution
    from venue_pricing.core.time.segmenter import HourSlot

LOGGER = logging.getLogger(__name__)

_SURGE_ONLY: frozenset[Level] = frozenset({Level.SURGE})


@dataclass(frozen=True, slots=True)
class _HourPrice:
    """Resolution of one slot before it is turned into output records."""

    price_per_hour: float
    source: SegmentSource
    reason: str
    winner: Candidate | None = None
    base_price_per_hour: float | None = None
    surge_multiplier: float | None = None
    default_level: Level | None = None


class PriceEngine(HourlyEngine):
    """Resolves the effective hourly price of a booking span.

    Per hour slot: collect matching rate sheets, pick the winner by level
    rank then priority, compose a surge multiplier over the best non-surge
    rate when a surge sheet wins, and fall back to the entity default
    cascade when nothing matched.
    """

    engine_name = "price"

    def calculate_price(self, context: PriceContext) -> PriceQuote:
        tz, surge_tz = self._clocks(context)
        sheets_by_level = context.sheets_by_level()

        segments: list[PriceSegment] = []
        decision_log: list[DecisionLogEntry] = []

        for index, slot in enumerate(
            split_into_hourly_slots(context.booking_start, context.booking_end), start=1
        ):
            candidates = find_candidates(
                slot.start,
                sheets_by_level,
                tz=tz,
                surge_tz=surge_tz,
                skip_zero_event_windows=not context.is_event_booking,
            )
            hour = self._resolve_hour(candidates, context.defaults)

            LOGGER.debug(
                "Hour slot resolved",
                extra={
                    "hour": index,
                    "slot_start": slot.start.isoformat(),
                    "candidates": len(candidates),
                    "source": hour.source.value,
                    "price_per_hour": hour.price_per_hour,
                },
            )

            segments.append(self._segment(slot, hour))
            decision_log.append(
                DecisionLogEntry(
                    hour=index,
                    timestamp=slot.start,
                    time_slot=self._time_slot_label(slot, tz),
                    candidate_count=len(candidates),
                    source=hour.source,
                    reason=hour.reason,
                    selected=sheet_ref(hour.winner) if hour.winner is not None else None,
                    values=self._values(hour),
                )
            )

        breakdown = build_breakdown([seg.source for seg in segments])
        summary = summarize_price(segments)

        warnings = self.config.priority_range_warnings(sheets_by_level)
        warnings.extend(self._fallback_warning(decision_log, "rate"))

        self._emit_resolved(
            context=context,
            breakdown=breakdown,
            decision_log=decision_log,
            total_hours=summary.total_hours,
            warnings=warnings,
        )

        return PriceQuote(
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

    def _resolve_hour(self, candidates: list[Candidate], defaults: RateDefaults) -> _HourPrice:
        winner = select_winner(candidates)

        if winner is None:
            return self._default_hour(
                resolve_default_rate(defaults, fallback=self.config.fallback_rate)
            )

        if winner.level is Level.SURGE and winner.sheet.type is SheetType.SURGE_MULTIPLIER:
            return self._surge_hour(winner, candidates, defaults)

        return _HourPrice(
            price_per_hour=float(winner.value),
            source=SegmentSource.RATE_SHEET,
            reason=winner_reason(winner),
            winner=winner,
        )

    def _surge_hour(
        self,
        surge: Candidate,
        candidates: list[Candidate],
        defaults: RateDefaults,
    ) -> _HourPrice:
        multiplier = float(surge.value)
        base = select_winner(candidates, exclude_levels=_SURGE_ONLY)

        if base is not None:
            base_rate = float(base.value)
            base_desc = f"{base.level.value} sheet '{base.sheet.name}'"
        else:
            default = resolve_default_rate(defaults, fallback=self.config.fallback_rate)
            base_rate = default.value
            base_desc = (
                "absolute fallback"
                if default.is_constant_fallback
                else f"{default.level.value} default"
            )

        return _HourPrice(
            price_per_hour=base_rate * multiplier,
            source=SegmentSource.SURGE,
            reason=f"surge '{surge.sheet.name}' x{multiplier:g} over {base_desc}",
            winner=surge,
            base_price_per_hour=base_rate,
            surge_multiplier=multiplier,
        )

    @staticmethod
    def _default_hour(default: DefaultResolution[float]) -> _HourPrice:
        if default.is_constant_fallback:
            reason = FALLBACK_REASON
        else:
            reason = f"no rule sheet matched, {default.level.value} default"

        return _HourPrice(
            price_per_hour=default.value,
            source=SegmentSource.DEFAULT_RATE,
            reason=reason,
            default_level=default.level,
        )

    # ---------------------------------------------------------------------
    # Output records
    # ---------------------------------------------------------------------

    @staticmethod
    def _segment(slot: HourSlot, hour: _HourPrice) -> PriceSegment:
        winner = hour.winner
        return PriceSegment(
            start_time=slot.start,
            end_time=slot.end,
            duration_hours=slot.duration_hours,
            price_per_hour=hour.price_per_hour,
            total_price=round(hour.price_per_hour * slot.duration_hours, 2),
            source=hour.source,
            sheet=sheet_ref(winner) if winner is not None else None,
            time_window=winner.time_window if winner is not None else None,
            base_price_per_hour=hour.base_price_per_hour,
            surge_multiplier=hour.surge_multiplier,
            default_level=hour.default_level,
        )

    @staticmethod
    def _values(hour: _HourPrice) -> dict[str, float]:
        values = {"price_per_hour": hour.price_per_hour}
        if hour.surge_multiplier is not None:
            values["base_price_per_hour"] = hour.base_price_per_hour
            values["surge_multiplier"] = hour.surge_multiplier
        return values
