"""Engine configuration model shared by the price and capacity engines."""

from __future__ import annotations

from typing import Any, Literal, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.types import CapacityBundle, CapacitySheet, RateSheet


class PriorityRange(BaseModel):
    min: int
    max: int

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> PriorityRange:
        if self.max < self.min:
            raise ValueError("priority range max must be >= min")
        return self

    def contains(self, priority: int) -> bool:
        return self.min <= priority <= self.max


def _default_priority_ranges() -> dict[Level, PriorityRange]:
    # SURGE is intentionally absent: surge priorities are unbounded.
    return {
        Level.CUSTOMER: PriorityRange(min=1000, max=1999),
        Level.LOCATION: PriorityRange(min=2000, max=2999),
        Level.SUBLOCATION: PriorityRange(min=3000, max=3999),
        Level.EVENT: PriorityRange(min=4000, max=4999),
    }


def _default_fallback_capacity() -> CapacityBundle:
    return CapacityBundle(min=0, max=100, default=50, allocated=0)


class EngineConfig(BaseModel):
    """Structured engine configuration.

    - fallback_rate / fallback_capacity: absolute constants used when no
      rule sheet matched and no entity default is present
    - surge_clock: clock that surge multiplier windows are authored in
    - priority_ranges: conventional priority band per level; sheets outside
      their band are reported as quote warnings, never rejected
    """

    fallback_rate: float = Field(default=0.0, ge=0)
    fallback_capacity: CapacityBundle = Field(default_factory=_default_fallback_capacity)

    surge_clock: Literal["UTC", "LOCAL"] = "UTC"

    priority_ranges: dict[Level, PriorityRange] = Field(default_factory=_default_priority_ranges)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, cfg_obj: dict[str, Any]) -> EngineConfig:
        """Create an EngineConfig instance from a JSON-compatible object."""
        return cls.model_validate(cfg_obj)

    def priority_range_warnings(
        self,
        sheets_by_level: Mapping[Level, Sequence[RateSheet | CapacitySheet]],
    ) -> list[str]:
        """Describe every sheet whose priority lies outside its level's band."""
        warnings: list[str] = []

        for level, sheets in sheets_by_level.items():
            band = self.priority_ranges.get(level)
            if band is None:
                continue

            for sheet in sheets:
                if not band.contains(sheet.priority):
                    warnings.append(
                        f"{level.value} sheet '{sheet.name}' has priority {sheet.priority} "
                        f"outside {band.min}-{band.max}"
                    )

        return warnings
