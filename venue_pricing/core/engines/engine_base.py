from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from venue_pricing.core.config.engine_config import EngineConfig
from venue_pricing.core.domain.quotes import SheetRef
from venue_pricing.core.events.events import QuoteResolvedEvent
from venue_pricing.core.events.event_bus import EventBus, NullEventBus
from venue_pricing.core.time.clock import UTC_ZONE, format_local_hhmm, resolve_timezone

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from venue_pricing.core.domain.quotes import Breakdown, DecisionLogEntry
    from venue_pricing.core.domain.types import ResolutionContextBase
    from venue_pricing.core.resolution.candidates import Candidate
    from venue_pricing.core.time.segmenter import HourSlot

LOGGER = logging.getLogger(__name__)

FALLBACK_REASON = "absolute fallback constant"


def sheet_ref(candidate: Candidate) -> SheetRef:
    sheet = candidate.sheet
    return SheetRef(
        id=sheet.id,
        name=sheet.name,
        type=sheet.type.value,
        priority=sheet.priority,
        level=candidate.level,
    )


def winner_reason(candidate: Candidate) -> str:
    """Human-readable reason a winning sheet was selected."""
    sheet = candidate.sheet
    where = f"window {candidate.time_window}" if candidate.time_window else sheet.type.value
    return (
        f"{candidate.level.value} sheet '{sheet.name}' (priority {sheet.priority}) "
        f"matched {where}"
    )


class HourlyEngine:
    """Shared plumbing of the hourly price and capacity engines.

    Engines hold no per-call state: every resolve call reads only its
    context and allocates its own output, so one instance may serve
    concurrent callers.
    """

    engine_name = "hourly"

    def __init__(
        self,
        config: EngineConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self._event_bus = event_bus if event_bus is not None else NullEventBus()

    def _clocks(self, context: ResolutionContextBase) -> tuple[ZoneInfo, ZoneInfo]:
        """Return (booking-local zone, zone used for surge windows)."""
        local_tz = resolve_timezone(context.timezone)
        surge_tz = UTC_ZONE if self.config.surge_clock == "UTC" else local_tz
        return local_tz, surge_tz

    @staticmethod
    def _time_slot_label(slot: HourSlot, tz: ZoneInfo) -> str:
        return f"{format_local_hhmm(slot.start, tz)} - {format_local_hhmm(slot.end, tz)}"

    @staticmethod
    def _fallback_warning(decision_log: Sequence[DecisionLogEntry], what: str) -> list[str]:
        fallback_hours = [entry.hour for entry in decision_log if entry.reason == FALLBACK_REASON]
        if not fallback_hours:
            return []
        return [
            f"{len(fallback_hours)} hour slot(s) resolved from the absolute fallback {what} "
            "(no rule sheet and no entity default)"
        ]

    def _emit_resolved(
        self,
        *,
        context: ResolutionContextBase,
        breakdown: Breakdown,
        decision_log: Sequence[DecisionLogEntry],
        total_hours: float,
        warnings: Sequence[str],
    ) -> None:
        fallback_segments = sum(1 for entry in decision_log if entry.reason == FALLBACK_REASON)

        if fallback_segments:
            LOGGER.warning(
                "Quote used absolute fallback values",
                extra={
                    "engine": self.engine_name,
                    "sublocation_id": context.sublocation_id,
                    "fallback_segments": fallback_segments,
                },
            )

        LOGGER.info(
            "Quote resolved",
            extra={
                "engine": self.engine_name,
                "segments": len(decision_log),
                "total_hours": total_hours,
            },
        )

        self._event_bus.emit(
            QuoteResolvedEvent(
                engine=self.engine_name,
                timezone=context.timezone,
                booking_start=context.booking_start.isoformat(),
                booking_end=context.booking_end.isoformat(),
                segments=len(decision_log),
                sheet_segments=breakdown.sheet_segments,
                default_segments=breakdown.default_segments,
                override_segments=breakdown.override_segments,
                surge_segments=breakdown.surge_segments,
                fallback_segments=fallback_segments,
                total_hours=total_hours,
                warnings=len(warnings),
            )
        )
