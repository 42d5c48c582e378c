"""
Surge factor calculation and surge rate sheet materialization.

Formula:
    pressure            = demand / supply
    normalized_pressure = pressure / historical_avg_pressure
    smoothed_pressure   = EMA(normalized_pressure)
    surge_factor        = clamp(1 + alpha * ln(smoothed_pressure), min, max)

A materialized surge sheet is a SURGE_MULTIPLIER rate sheet meant for the
SURGE level of a price context. Its windows are in UTC.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import dataclass

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from venue_pricing.core.domain.types import (
    HHMM_PATTERN,
    AbsoluteWindow,
    AppliesTo,
    RateSheet,
    SheetType,
)

LOGGER = logging.getLogger(__name__)

# Materialized surge sheets outrank every authored sheet.
SURGE_PRIORITY_BASE = 10000
SURGE_SHEET_PREFIX = "SURGE: "


# ---------------------------------------------------------------------------
# Surge factor
# ---------------------------------------------------------------------------


class SurgeCalculationParams(BaseModel):
    demand: float = Field(..., ge=0)
    supply: float = Field(..., ge=0)
    historical_avg_pressure: float = Field(..., ge=0)
    alpha: float = Field(default=0.3, ge=0)  # sensitivity
    min_multiplier: float = Field(default=0.75, gt=0)
    max_multiplier: float = Field(default=1.8, gt=0)
    ema_alpha: float = Field(default=0.3, ge=0, le=1)
    previous_smoothed_pressure: float | None = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> SurgeCalculationParams:
        if self.max_multiplier < self.min_multiplier:
            raise ValueError("max_multiplier must be >= min_multiplier")
        return self


@dataclass(frozen=True, slots=True)
class SurgeCalculationResult:
    surge_factor: float
    pressure: float
    normalized_pressure: float
    smoothed_pressure: float
    raw_factor: float
    # False when the factor could not be computed and is neutral
    applied: bool


NEUTRAL_SURGE = SurgeCalculationResult(
    surge_factor=1.0,
    pressure=0.0,
    normalized_pressure=0.0,
    smoothed_pressure=0.0,
    raw_factor=1.0,
    applied=False,
)


def calculate_surge_factor(params: SurgeCalculationParams) -> SurgeCalculationResult:
    """Compute the surge multiplier for the current demand and supply."""
    if params.supply == 0:
        LOGGER.warning("Surge supply is zero; returning neutral factor")
        return NEUTRAL_SURGE

    historical = params.historical_avg_pressure
    if historical == 0:
        LOGGER.warning("Surge historical average pressure is zero; treating as 1.0")
        historical = 1.0

    pressure = params.demand / params.supply
    normalized = pressure / historical

    if params.previous_smoothed_pressure is not None:
        smoothed = (
            params.ema_alpha * normalized
            + (1 - params.ema_alpha) * params.previous_smoothed_pressure
        )
    else:
        smoothed = normalized

    if smoothed <= 0:
        # ln(0) is undefined; no demand pins the factor to the floor.
        raw_factor = params.min_multiplier
    else:
        raw_factor = 1 + params.alpha * math.log(smoothed)

    surge_factor = max(params.min_multiplier, min(params.max_multiplier, raw_factor))

    return SurgeCalculationResult(
        surge_factor=surge_factor,
        pressure=pressure,
        normalized_pressure=normalized,
        smoothed_pressure=smoothed,
        raw_factor=raw_factor,
        applied=True,
    )


def apply_surge_to_price(base_price: float, result: SurgeCalculationResult) -> float:
    if not result.applied:
        return base_price
    return base_price * result.surge_factor


# ---------------------------------------------------------------------------
# Surge configs and materialization
# ---------------------------------------------------------------------------


class SurgeTimeWindow(BaseModel):
    start_time: str = Field(default="00:00", pattern=HHMM_PATTERN)
    end_time: str = Field(default="23:59", pattern=HHMM_PATTERN)
    days_of_week: tuple[int, ...] | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class SurgeConfig(BaseModel):
    """Authored surge configuration for one location or sublocation.

    - applies_to: entity the surge targets; the materialized sheet keeps it
    - priority: added to the surge priority base
    - surge_duration_hours: lifetime of a materialized sheet
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    applies_to: AppliesTo
    priority: int = Field(default=0, ge=0)
    effective_from: AwareDatetime

    calculation: SurgeCalculationParams
    time_windows: tuple[SurgeTimeWindow, ...] = ()
    surge_duration_hours: int = Field(default=1, ge=1, le=23)

    model_config = ConfigDict(extra="forbid", frozen=True)


def _surge_windows(
    config: SurgeConfig,
    multiplier: float,
    demand_hour: dt.datetime | None,
) -> tuple[AbsoluteWindow[float], ...]:
    if demand_hour is not None:
        start_hour = (demand_hour.astimezone(dt.timezone.utc).hour + 1) % 24
        end_hour = (start_hour + config.surge_duration_hours) % 24
        return (
            AbsoluteWindow[float](
                start_time=f"{start_hour:02d}:00",
                end_time=f"{end_hour:02d}:00",
                value=multiplier,
            ),
        )

    if not config.time_windows:
        return (AbsoluteWindow[float](start_time="00:00", end_time="23:59", value=multiplier),)

    return tuple(
        AbsoluteWindow[float](
            start_time=tw.start_time,
            end_time=tw.end_time,
            value=multiplier,
            days_of_week=tw.days_of_week or None,
        )
        for tw in config.time_windows
    )


def materialize_surge_sheet(
    config: SurgeConfig,
    *,
    demand_hour: dt.datetime | None = None,
) -> RateSheet:
    """Turn ``config`` into an inactive (draft) SURGE_MULTIPLIER rate sheet.

    With ``demand_hour`` the sheet is predictive: one UTC window starting at
    the hour after the observed demand, lasting ``surge_duration_hours``.
    The caller activates the sheet once approved.
    """

    result = calculate_surge_factor(config.calculation)
    multiplier = result.surge_factor

    if demand_hour is not None:
        demand_utc = demand_hour.astimezone(dt.timezone.utc)
        effective_from = demand_utc.replace(minute=0, second=0, microsecond=0) + dt.timedelta(
            hours=1
        )
    else:
        effective_from = config.effective_from

    effective_to = effective_from + dt.timedelta(hours=config.surge_duration_hours)

    sheet = RateSheet(
        id=f"surge-{config.id}-{effective_from.strftime('%Y%m%dT%H%M')}",
        name=f"{SURGE_SHEET_PREFIX}{config.name}",
        type=SheetType.SURGE_MULTIPLIER,
        applies_to=config.applies_to,
        priority=SURGE_PRIORITY_BASE + config.priority,
        effective_from=effective_from,
        effective_to=effective_to,
        is_active=False,
        windows=_surge_windows(config, multiplier, demand_hour),
    )

    LOGGER.info(
        "Surge sheet materialized",
        extra={
            "surge_config_id": config.id,
            "mode": "predictive" if demand_hour is not None else "manual",
            "multiplier": multiplier,
            "applied": result.applied,
            "effective_from": effective_from.isoformat(),
            "effective_to": effective_to.isoformat(),
        },
    )

    return sheet
