"""
Hierarchy level definitions.

Rule sheets and entity defaults are scoped to one organizational level.
Levels are strictly ordered by dominance; the rank is the only thing the
resolvers compare, so it lives here and nowhere else.
"""

from __future__ import annotations

from enum import Enum


class Level(str, Enum):
    CUSTOMER = "CUSTOMER"
    LOCATION = "LOCATION"
    SUBLOCATION = "SUBLOCATION"
    EVENT = "EVENT"
    # Virtual level, price resolution only.
    SURGE = "SURGE"

    def rank(self) -> int:
        """Return the dominance rank (higher wins)."""
        return LEVEL_RANKS[self]


LEVEL_RANKS: dict[Level, int] = {
    Level.CUSTOMER: 1,
    Level.LOCATION: 2,
    Level.SUBLOCATION: 3,
    Level.EVENT: 4,
    Level.SURGE: 5,
}


# Order in which entity defaults are consulted when no rule sheet matches.
DEFAULT_CASCADE_ORDER: tuple[Level, ...] = (
    Level.EVENT,
    Level.SUBLOCATION,
    Level.LOCATION,
    Level.CUSTOMER,
)
