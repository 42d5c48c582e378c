"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any

from venue_pricing.core.events.events import QuoteResolvedEvent


class LoggingEventSink:
    """
    Logs quote events through a standard library logger.

    Quotes with hours priced from the absolute fallback are logged at
    ``fallback_level`` so they stand out from ordinary quotes.
    """

    def __init__(
        self,
        logger: logging.Logger,
        level: int = logging.INFO,
        fallback_level: int = logging.WARNING,
    ) -> None:
        self._logger = logger
        self._level = level
        self._fallback_level = fallback_level

    def on_event(self, event: Any) -> None:
        if not isinstance(event, QuoteResolvedEvent):
            self._logger.log(self._level, "event %s", type(event).__name__, extra={"event": event})
            return

        level = self._fallback_level if event.fallback_segments else self._level
        self._logger.log(
            level,
            "quote_event engine=%s segments=%d fallback=%d",
            event.engine,
            event.segments,
            event.fallback_segments,
            extra={"event_type": type(event).__name__, "event": event},
        )
