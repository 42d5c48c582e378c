from __future__ import annotations

import json
import logging
import os
from typing import Any

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

from venue_pricing.core.events.events import QuoteResolvedEvent

LOGGER = logging.getLogger(__name__)

# Gauge name -> QuoteResolvedEvent attribute.
QUOTE_GAUGES: dict[str, str] = {
    "venue_pricing_quote_segments": "segments",
    "venue_pricing_quote_sheet_segments": "sheet_segments",
    "venue_pricing_quote_default_segments": "default_segments",
    "venue_pricing_quote_override_segments": "override_segments",
    "venue_pricing_quote_surge_segments": "surge_segments",
    "venue_pricing_quote_fallback_segments": "fallback_segments",
    "venue_pricing_quote_total_hours": "total_hours",
    "venue_pricing_quote_warnings": "warnings",
}

QUOTES_RESOLVED = "venue_pricing_quotes_resolved"


class PrometheusMetricsClient:
    """Prometheus Pushgateway client for one-shot quote runs.

    Expected environment:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.monitoring.svc.cluster.local:9091

    Optional:
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key.

    The client doubles as an event sink: every QuoteResolvedEvent sets the
    quote gauges, labelled by engine. Delivery is best-effort and never
    fails a quote.
    """

    def __init__(self) -> None:
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self._registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring")
            return {}

        if not isinstance(data, dict):
            return {}

        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _gauge(self, name: str) -> Gauge:
        gauge = self._gauges.get(name)
        if gauge is None:
            gauge = Gauge(
                name,
                documentation=name,
                labelnames=["engine", "timezone"],
                registry=self._registry,
            )
            self._gauges[name] = gauge
        return gauge

    def on_event(self, event: Any) -> None:
        if not isinstance(event, QuoteResolvedEvent):
            return

        labels = {"engine": event.engine, "timezone": event.timezone}
        for name, attr in QUOTE_GAUGES.items():
            self._gauge(name).labels(**labels).set(float(getattr(event, attr)))
        # last-value gauges above; this one accumulates across the run
        self._gauge(QUOTES_RESOLVED).labels(**labels).inc()

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )
