from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from venue_pricing.core.config.engine_config import EngineConfig
from venue_pricing.core.domain.types import CapacityContext, PriceContext
from venue_pricing.core.engines.capacity_engine import CapacityEngine
from venue_pricing.core.engines.price_engine import PriceEngine
from venue_pricing.core.events.event_bus import EventBus
from venue_pricing.core.events.sinks.file_recorder import FileRecorderSink
from venue_pricing.core.events.sinks.sink_logging import LoggingEventSink
from venue_pricing.runtime.prometheus_metrics import PrometheusMetricsClient

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="venue-pricing",
        description="Resolve hourly price or capacity for a booking span",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for the run (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("price", "Resolve the hourly price of a booking."),
        ("capacity", "Resolve the hourly capacity of a booking."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--context",
            type=Path,
            required=True,
            help="Path to the resolution context JSON (sheets, defaults, booking span).",
        )
        sub.add_argument(
            "--config",
            type=Path,
            default=None,
            help="Optional engine config JSON.",
        )
        sub.add_argument(
            "--out",
            type=Path,
            default=None,
            help="Write the quote JSON here instead of stdout.",
        )
        sub.add_argument(
            "--record",
            type=Path,
            default=None,
            help="Append quote events to this JSON lines file.",
        )

    return parser


def _build_event_bus(
    record_path: Path | None,
    metrics: PrometheusMetricsClient,
) -> EventBus:
    bus = EventBus([LoggingEventSink(logging.getLogger("venue_pricing.events"))])
    if record_path is not None:
        bus.register(FileRecorderSink(record_path))
    if metrics.is_enabled():
        bus.register(metrics)
    return bus


def _resolve(command: str, cfg: EngineConfig, ctx_obj: dict[str, Any], bus: EventBus) -> dict[str, Any]:
    if command == "price":
        price_quote = PriceEngine(cfg, bus).calculate_price(PriceContext.model_validate(ctx_obj))
        return price_quote.to_json_obj()

    capacity_quote = CapacityEngine(cfg, bus).calculate_capacity(
        CapacityContext.model_validate(ctx_obj)
    )
    return capacity_quote.to_json_obj()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        cfg = (
            EngineConfig.from_json_obj(_load_json(args.config))
            if args.config is not None
            else EngineConfig()
        )
        ctx_obj = _load_json(args.context)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    metrics = PrometheusMetricsClient()
    bus = _build_event_bus(args.record, metrics)

    try:
        quote = _resolve(args.command, cfg, ctx_obj, bus)
    except ValidationError as exc:
        print(f"Error: invalid {args.command} context\n{exc}", file=sys.stderr)
        return 2
    finally:
        bus.close()

    # --- Prometheus metrics (side-effect only) ---
    if metrics.is_enabled():
        try:
            metrics.push_all(job=f"venue_pricing_{args.command}")
        except Exception:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Prometheus push failed")

    payload = json.dumps(quote, indent=2)
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)

    return 0


if __name__ == "__main__":
    sys.exit(main())
