"""Candidate collection for one hour slot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.types import (
    CapacityBundle,
    CapacitySheet,
    RateSheet,
    SheetType,
    WINDOWED_SHEET_TYPES,
)
from venue_pricing.core.resolution.window_matcher import window_matches

if TYPE_CHECKING:
    from datetime import datetime
    from zoneinfo import ZoneInfo


@dataclass(frozen=True, slots=True)
class Candidate:
    """A rule sheet that matched an hour, with the value it contributes.

    - value: price per hour (or multiplier) for rate sheets, a capacity
      bundle for capacity sheets
    - time_window: label of the matched window, None for date/event matches
    """

    sheet: RateSheet | CapacitySheet
    value: float | CapacityBundle
    level: Level
    time_window: str | None = None


def is_zero_value(value: float | CapacityBundle) -> bool:
    """Zero rate, or a capacity bundle with no room at all."""
    if isinstance(value, CapacityBundle):
        return value.max == 0
    return value == 0


def find_candidates(
    instant: datetime,
    sheets_by_level: Mapping[Level, Sequence[RateSheet | CapacitySheet]],
    *,
    tz: ZoneInfo,
    surge_tz: ZoneInfo,
    skip_zero_event_windows: bool = False,
) -> list[Candidate]:
    """Collect every sheet matching ``instant`` across all supplied levels.

    The result is in supply order (levels as given, sheets in list order);
    ranking is the priority resolver's job.

    ``skip_zero_event_windows`` drops any EVENT-level match whose value is
    exactly zero, so free grace periods do not zero-rate bookings that are
    not part of the event.
    """

    candidates: list[Candidate] = []

    for level, sheets in sheets_by_level.items():
        for sheet in sheets:
            candidate = _match_sheet(
                sheet,
                level,
                instant,
                tz=tz,
                surge_tz=surge_tz,
                skip_zero_windows=skip_zero_event_windows and level is Level.EVENT,
            )
            if candidate is not None:
                candidates.append(candidate)

    return candidates


# pylint: disable=too-many-return-statements
def _match_sheet(
    sheet: RateSheet | CapacitySheet,
    level: Level,
    instant: datetime,
    *,
    tz: ZoneInfo,
    surge_tz: ZoneInfo,
    skip_zero_windows: bool,
) -> Candidate | None:
    if not sheet.is_active:
        return None

    if not sheet.is_effective_at(instant):
        return None

    if sheet.type in WINDOWED_SHEET_TYPES:
        clock = surge_tz if sheet.type is SheetType.SURGE_MULTIPLIER else tz

        for window in sheet.windows:
            if skip_zero_windows and is_zero_value(window.value):
                continue
            if window_matches(window, instant, reference=sheet.effective_from, tz=clock):
                return Candidate(
                    sheet=sheet,
                    value=window.value,
                    level=level,
                    time_window=window.label(),
                )
        return None

    if sheet.type is SheetType.DATE_BASED:
        for date_range in sheet.date_ranges:
            if skip_zero_windows and is_zero_value(date_range.value):
                continue
            if date_range.start_date <= instant <= date_range.end_date:
                return Candidate(sheet=sheet, value=date_range.value, level=level)
        return None

    if sheet.type is SheetType.EVENT_BASED and sheet.event_value is not None:
        if skip_zero_windows and is_zero_value(sheet.event_value):
            return None
        return Candidate(sheet=sheet, value=sheet.event_value, level=level)

    return None
