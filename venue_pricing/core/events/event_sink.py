"""
Event sink interfaces.

A sink receives every quote event the bus emits. Sinks that hold resources
(files, gateways) also implement ``close`` and are finalized by the bus.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a quote event."""


@runtime_checkable
class ClosableEventSink(EventSink, Protocol):
    def close(self) -> None:
        """Release whatever the sink holds. Called at most once by the bus."""
