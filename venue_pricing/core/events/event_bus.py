"""
Synchronous event bus for quote events.

Engines emit one event per quote; the bus hands it to each sink in
registration order on the calling thread. A closed bus refuses new events.
"""
from __future__ import annotations

from typing import Any, Iterable

from venue_pricing.core.events.event_sink import ClosableEventSink, EventSink


class EventBus:
    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False
        self.emitted = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def register(self, sink: EventSink) -> None:
        if self._closed:
            raise RuntimeError("cannot register a sink on a closed event bus")
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        if self._closed:
            raise RuntimeError(f"event bus closed, dropping {type(event).__name__}")
        for sink in self._sinks:
            sink.on_event(event)
        self.emitted += 1

    def close(self) -> None:
        """Close sinks exposing ``close()``; a second call is a no-op."""
        if self._closed:
            return
        self._closed = True
        for sink in self._sinks:
            if isinstance(sink, ClosableEventSink):
                sink.close()


class NullEventBus(EventBus):
    """Counts events and delivers them nowhere. Engines use it when no bus is given."""

    def __init__(self) -> None:
        super().__init__(sinks=())

    def register(self, sink: EventSink) -> None:
        raise TypeError("NullEventBus does not accept sinks")
