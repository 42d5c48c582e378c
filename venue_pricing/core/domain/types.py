"""Core input data models.

This module defines the canonical Pydantic models for rule sheets, their
time windows, capacity bundles, hourly overrides, entity defaults and the
per-call resolution contexts. All models are frozen: the engines only read
them, and resolving the same context twice must give identical output.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, Any, Generic, Literal, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from venue_pricing.core.domain.levels import Level

HHMM_PATTERN = r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$"

# 0=Sunday .. 6=Saturday; when present it must name at least one day
DaysOfWeek = Annotated[tuple[Annotated[int, Field(ge=0, le=6)], ...], Field(min_length=1)]

ValueT = TypeVar("ValueT")


# ---------------------------------------------------------------------------
# Common models
# ---------------------------------------------------------------------------


class SheetType(str, Enum):
    TIME_BASED = "TIME_BASED"
    DATE_BASED = "DATE_BASED"
    EVENT_BASED = "EVENT_BASED"
    DURATION_BASED = "DURATION_BASED"
    SURGE_MULTIPLIER = "SURGE_MULTIPLIER"


# Legacy spelling still present in stored rate sheets.
SHEET_TYPE_ALIASES: dict[str, str] = {"TIMING_BASED": "TIME_BASED"}

WINDOWED_SHEET_TYPES: frozenset[SheetType] = frozenset(
    {
        SheetType.TIME_BASED,
        SheetType.DURATION_BASED,
        SheetType.SURGE_MULTIPLIER,
    }
)


class AppliesTo(BaseModel):
    level: Level
    entity_id: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class CapacityBundle(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    default: float = Field(..., ge=0)
    allocated: float = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def available(self) -> float:
        return self.max - self.allocated


# ---------------------------------------------------------------------------
# Windows (tagged union on window_type)
# ---------------------------------------------------------------------------


class AbsoluteWindow(BaseModel, Generic[ValueT]):
    """Clock-time window, ``[start_time, end_time)`` in HH:MM.

    ``end_time < start_time`` denotes an overnight window.
    """

    window_type: Literal["ABSOLUTE_TIME"] = "ABSOLUTE_TIME"
    start_time: str = Field(..., pattern=HHMM_PATTERN)
    end_time: str = Field(..., pattern=HHMM_PATTERN)
    value: ValueT
    days_of_week: DaysOfWeek | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    def label(self) -> str:
        return f"{self.start_time}-{self.end_time}"


class DurationWindow(BaseModel, Generic[ValueT]):
    """Window addressed in minutes from the owning sheet's ``effective_from``."""

    window_type: Literal["DURATION_BASED"] = "DURATION_BASED"
    start_minute: int = Field(..., ge=0)
    end_minute: int = Field(..., ge=0)
    value: ValueT
    days_of_week: DaysOfWeek | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_span(self) -> DurationWindow:
        if self.end_minute <= self.start_minute:
            raise ValueError("duration window end_minute must be greater than start_minute")
        return self

    def label(self) -> str:
        return f"+{self.start_minute}m-+{self.end_minute}m"


class DateRange(BaseModel, Generic[ValueT]):
    start_date: AwareDatetime
    end_date: AwareDatetime
    value: ValueT

    model_config = ConfigDict(extra="forbid", frozen=True)


RateWindow = Annotated[
    AbsoluteWindow[float] | DurationWindow[float],
    Field(discriminator="window_type"),
]

CapacityWindow = Annotated[
    AbsoluteWindow[CapacityBundle] | DurationWindow[CapacityBundle],
    Field(discriminator="window_type"),
]


# ---------------------------------------------------------------------------
# Rule sheets
# ---------------------------------------------------------------------------


class RuleSheetBase(BaseModel):
    """
    Fields shared by rate sheets and capacity sheets.

    Notes:
    - ``priority`` is compared only between sheets of the same level; level
      rank always dominates.
    - ``effective_to`` of None means open-ended.
    - windows are evaluated in declaration order, first match wins.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: SheetType
    applies_to: AppliesTo | None = None
    priority: int
    effective_from: AwareDatetime
    effective_to: AwareDatetime | None = None
    is_active: bool = True

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_fields(cls, data: Any) -> Any:
        """Map legacy type spellings and default untagged windows to ABSOLUTE_TIME."""
        if not isinstance(data, dict):
            return data

        d = dict(data)

        sheet_type = d.get("type")
        if isinstance(sheet_type, str) and sheet_type in SHEET_TYPE_ALIASES:
            d["type"] = SHEET_TYPE_ALIASES[sheet_type]

        windows = d.get("windows")
        if isinstance(windows, (list, tuple)):
            normalized = []
            for window in windows:
                if isinstance(window, dict) and "window_type" not in window:
                    window = {**window, "window_type": "ABSOLUTE_TIME"}
                normalized.append(window)
            d["windows"] = normalized

        return d

    def is_effective_at(self, instant: dt.datetime) -> bool:
        """Return True if ``instant`` lies in ``[effective_from, effective_to]``."""
        if instant < self.effective_from:
            return False
        if self.effective_to is not None and instant > self.effective_to:
            return False
        return True


class RateSheet(RuleSheetBase):
    """Price rule sheet. Values are a price per hour, or a multiplier for
    SURGE_MULTIPLIER sheets."""

    windows: tuple[RateWindow, ...] = ()
    date_ranges: tuple[DateRange[float], ...] = ()
    event_value: float | None = None


class CapacitySheet(RuleSheetBase):
    windows: tuple[CapacityWindow, ...] = ()
    date_ranges: tuple[DateRange[CapacityBundle], ...] = ()
    event_value: CapacityBundle | None = None


# ---------------------------------------------------------------------------
# Overrides and entity defaults
# ---------------------------------------------------------------------------


class HourlyOverride(BaseModel):
    """Explicit capacity for one local (date, hour). Missing fields fall back
    to the default cascade."""

    date: dt.date
    hour: int = Field(..., ge=0, le=23)
    min: float | None = Field(default=None, ge=0)
    max: float | None = Field(default=None, ge=0)
    default: float | None = Field(default=None, ge=0)
    allocated: float | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class RateDefaults(BaseModel):
    customer: float | None = Field(default=None, ge=0)
    location: float | None = Field(default=None, ge=0)
    sublocation: float | None = Field(default=None, ge=0)
    event: float | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def for_level(self, level: Level) -> float | None:
        return getattr(self, level.value.lower())


class CapacityDefaults(BaseModel):
    customer: CapacityBundle | None = None
    location: CapacityBundle | None = None
    sublocation: CapacityBundle | None = None
    event: CapacityBundle | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    def for_level(self, level: Level) -> CapacityBundle | None:
        return getattr(self, level.value.lower())


# ---------------------------------------------------------------------------
# Resolution contexts
# ---------------------------------------------------------------------------


class ResolutionContextBase(BaseModel):
    """Everything one resolution call reads. Built by the caller from storage."""

    booking_start: AwareDatetime
    booking_end: AwareDatetime
    timezone: str = Field(..., min_length=1)

    customer_id: str | None = None
    location_id: str | None = None
    sublocation_id: str | None = None
    event_id: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown IANA timezone: {value}") from exc
        return value

    @model_validator(mode="after")
    def _validate_span(self) -> ResolutionContextBase:
        if self.booking_end <= self.booking_start:
            raise ValueError("booking_end must be after booking_start")
        return self


class PriceContext(ResolutionContextBase):
    customer_sheets: tuple[RateSheet, ...] = ()
    location_sheets: tuple[RateSheet, ...] = ()
    sublocation_sheets: tuple[RateSheet, ...] = ()
    event_sheets: tuple[RateSheet, ...] = ()
    surge_sheets: tuple[RateSheet, ...] = ()

    defaults: RateDefaults = Field(default_factory=RateDefaults)

    # Zero-rate EVENT windows (grace periods) only apply to event bookings.
    is_event_booking: bool = False

    def sheets_by_level(self) -> dict[Level, tuple[RateSheet, ...]]:
        return {
            Level.SURGE: self.surge_sheets,
            Level.EVENT: self.event_sheets,
            Level.SUBLOCATION: self.sublocation_sheets,
            Level.LOCATION: self.location_sheets,
            Level.CUSTOMER: self.customer_sheets,
        }


class CapacityContext(ResolutionContextBase):
    customer_sheets: tuple[CapacitySheet, ...] = ()
    location_sheets: tuple[CapacitySheet, ...] = ()
    sublocation_sheets: tuple[CapacitySheet, ...] = ()
    event_sheets: tuple[CapacitySheet, ...] = ()

    defaults: CapacityDefaults = Field(default_factory=CapacityDefaults)

    # The sublocation's stored override table.
    hourly_overrides: tuple[HourlyOverride, ...] = ()

    def sheets_by_level(self) -> dict[Level, tuple[CapacitySheet, ...]]:
        return {
            Level.EVENT: self.event_sheets,
            Level.SUBLOCATION: self.sublocation_sheets,
            Level.LOCATION: self.location_sheets,
            Level.CUSTOMER: self.customer_sheets,
        }
