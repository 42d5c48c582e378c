"""
Auto-generated event rate sheets.

An event gets one EVENT-level DURATION_BASED rate sheet whose windows are
addressed from ``start - grace_before``:

    [0, grace_before)                        -> 0 (free grace)
    [grace_before, grace_before + duration)  -> event hourly rate
    [.., .. + grace_after)                   -> 0 (free grace)

The zero-rate grace windows only take effect for bookings flagged as event
bookings; see the candidate finder.
"""

from __future__ import annotations

import datetime as dt
import logging

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.types import AppliesTo, DurationWindow, RateSheet, SheetType

LOGGER = logging.getLogger(__name__)

# Auto-generated event sheets sit in the 4900-4999 sub-band of EVENT.
AUTO_EVENT_PRIORITY = 4900
AUTO_SHEET_PREFIX = "Auto-"


class EventSpec(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    start: AwareDatetime
    end: AwareDatetime
    hourly_rate: float = Field(default=0.0, ge=0)
    grace_before_minutes: int = Field(default=0, ge=0)
    grace_after_minutes: int = Field(default=0, ge=0)
    is_active: bool = True

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_span(self) -> EventSpec:
        if self.end - self.start < dt.timedelta(minutes=1):
            raise ValueError("event must end at least one minute after it starts")
        return self


def auto_sheet_name(event_name: str) -> str:
    return f"{AUTO_SHEET_PREFIX}{event_name}"


def build_event_rate_sheet(event: EventSpec) -> RateSheet:
    """Build the auto rate sheet for ``event``, grace periods included."""
    grace_before = event.grace_before_minutes
    grace_after = event.grace_after_minutes
    duration_minutes = int((event.end - event.start).total_seconds() // 60)

    windows: list[DurationWindow[float]] = []
    cursor = 0

    if grace_before > 0:
        windows.append(DurationWindow[float](start_minute=0, end_minute=grace_before, value=0.0))
        cursor = grace_before

    windows.append(
        DurationWindow[float](
            start_minute=cursor,
            end_minute=cursor + duration_minutes,
            value=event.hourly_rate,
        )
    )
    cursor += duration_minutes

    if grace_after > 0:
        windows.append(
            DurationWindow[float](start_minute=cursor, end_minute=cursor + grace_after, value=0.0)
        )

    sheet = RateSheet(
        id=f"auto-{event.id}",
        name=auto_sheet_name(event.name),
        type=SheetType.DURATION_BASED,
        applies_to=AppliesTo(level=Level.EVENT, entity_id=event.id),
        priority=AUTO_EVENT_PRIORITY,
        effective_from=event.start - dt.timedelta(minutes=grace_before),
        effective_to=event.end + dt.timedelta(minutes=grace_after),
        is_active=event.is_active,
        windows=tuple(windows),
    )

    LOGGER.info(
        "Event rate sheet built",
        extra={
            "event_id": event.id,
            "sheet_name": sheet.name,
            "windows": len(windows),
            "grace_before_minutes": grace_before,
            "grace_after_minutes": grace_after,
        },
    )

    return sheet
