"""
Entity default cascade.

Used only for hours where no rule sheet matched. Defaults are consulted in
strict order Event -> SubLocation -> Location -> Customer; if none is
present the configured absolute constant is used, so resolution never
fails for lack of data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from venue_pricing.core.domain.levels import DEFAULT_CASCADE_ORDER, Level
from venue_pricing.core.domain.types import CapacityBundle, CapacityDefaults, RateDefaults

ValueT = TypeVar("ValueT")


@dataclass(frozen=True, slots=True)
class DefaultResolution(Generic[ValueT]):
    """Resolved default value and the level it came from.

    level is None when the absolute constant was used.
    """

    value: ValueT
    level: Level | None

    @property
    def is_constant_fallback(self) -> bool:
        return self.level is None


def resolve_default_rate(
    defaults: RateDefaults,
    *,
    fallback: float,
) -> DefaultResolution[float]:
    for level in DEFAULT_CASCADE_ORDER:
        rate = defaults.for_level(level)
        if rate is not None:
            return DefaultResolution(value=rate, level=level)
    return DefaultResolution(value=fallback, level=None)


def resolve_default_capacity(
    defaults: CapacityDefaults,
    *,
    fallback: CapacityBundle,
) -> DefaultResolution[CapacityBundle]:
    for level in DEFAULT_CASCADE_ORDER:
        bundle = defaults.for_level(level)
        if bundle is not None:
            return DefaultResolution(value=bundle, level=level)
    return DefaultResolution(value=fallback, level=None)
