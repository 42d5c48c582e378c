"""
Priority resolution.

Ordering, most significant first:
1. level rank, descending (SURGE > EVENT > SUBLOCATION > LOCATION > CUSTOMER)
2. declared priority, descending
3. non-zero value before zero value
4. supply order (the sort is stable)
"""

from __future__ import annotations

from typing import Iterable

from venue_pricing.core.domain.levels import Level
from venue_pricing.core.resolution.candidates import Candidate, is_zero_value


def _sort_key(candidate: Candidate) -> tuple[int, int, bool]:
    return (
        -candidate.level.rank(),
        -candidate.sheet.priority,
        is_zero_value(candidate.value),
    )


def rank_candidates(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Return candidates ordered best first. The input is not modified."""
    return sorted(candidates, key=_sort_key)


def select_winner(
    candidates: Iterable[Candidate],
    *,
    exclude_levels: frozenset[Level] = frozenset(),
) -> Candidate | None:
    """Return the best candidate, or None when nothing is eligible."""
    eligible = [c for c in candidates if c.level not in exclude_levels]
    if not eligible:
        return None
    return rank_candidates(eligible)[0]
