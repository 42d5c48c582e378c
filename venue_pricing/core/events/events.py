"""
Quote event models.

One event is emitted per resolution call. Events summarize where the
hours of a quote came from; the full per-hour trail is the quote's own
decision log.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class QuoteResolvedEvent:
    engine: str  # "price" | "capacity"
    timezone: str

    booking_start: str
    booking_end: str

    segments: int
    sheet_segments: int
    default_segments: int
    override_segments: int
    surge_segments: int
    # hours that fell through to the absolute constant
    fallback_segments: int

    total_hours: float
    warnings: int
