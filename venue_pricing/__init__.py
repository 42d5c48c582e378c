"""Public API for the venue_pricing package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Authoring helpers
# ----------------------------------------------------------------------
from venue_pricing.authoring.event_sheets import EventSpec, build_event_rate_sheet
from venue_pricing.authoring.surge import (
    SurgeCalculationParams,
    SurgeCalculationResult,
    SurgeConfig,
    calculate_surge_factor,
    materialize_surge_sheet,
)

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from venue_pricing.core.config.engine_config import EngineConfig, PriorityRange

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from venue_pricing.core.domain.levels import Level
from venue_pricing.core.domain.quotes import (
    CapacityQuote,
    CapacitySegment,
    DecisionLogEntry,
    PriceQuote,
    PriceSegment,
    SegmentSource,
)
from venue_pricing.core.domain.types import (
    AbsoluteWindow,
    CapacityBundle,
    CapacityContext,
    CapacityDefaults,
    CapacitySheet,
    DurationWindow,
    HourlyOverride,
    PriceContext,
    RateDefaults,
    RateSheet,
    SheetType,
)

# ----------------------------------------------------------------------
# Engines
# ----------------------------------------------------------------------
from venue_pricing.core.engines.capacity_engine import CapacityEngine
from venue_pricing.core.engines.price_engine import PriceEngine

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Engines
    "PriceEngine",
    "CapacityEngine",

    # Config
    "EngineConfig",
    "PriorityRange",

    # Inputs
    "Level",
    "SheetType",
    "AbsoluteWindow",
    "DurationWindow",
    "CapacityBundle",
    "RateSheet",
    "CapacitySheet",
    "HourlyOverride",
    "RateDefaults",
    "CapacityDefaults",
    "PriceContext",
    "CapacityContext",

    # Outputs
    "PriceQuote",
    "PriceSegment",
    "CapacityQuote",
    "CapacitySegment",
    "DecisionLogEntry",
    "SegmentSource",

    # Authoring
    "EventSpec",
    "build_event_rate_sheet",
    "SurgeCalculationParams",
    "SurgeCalculationResult",
    "SurgeConfig",
    "calculate_surge_factor",
    "materialize_surge_sheet",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("venue-pricing")
except PackageNotFoundError:
    __version__ = "0.0.0"
