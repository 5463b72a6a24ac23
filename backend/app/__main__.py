"""CLI entry point for computing indicators over a candle file.

Usage:
    python -m app candles.csv
    python -m app candles.csv --config chart.yaml --output overlay.json
    python -m app candles.csv --symbol BTC-USD --verbose

The CSV needs a header with time,open,high,low,close[,volume] columns;
time is unix seconds or ISO-8601.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

import orjson
import yaml

from app.chart_config import load_chart_config
from app.config import get_settings
from app.services.indicator_service import ChartOverlay, IndicatorService
from app.services.notifications import build_signal_notification
from core.models import CandleSeries
from core.models.converters import candles_from_dicts
from core.trading_utils import side_for_signal

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m app",
        description="Compute technical indicators and the latest MACD signal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m app candles.csv
  python -m app candles.csv --config chart.yaml --output overlay.json
        """,
    )
    parser.add_argument(
        "candles",
        type=Path,
        help="CSV file with time,open,high,low,close,volume columns",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Chart overlay profile (default: INDICATORS_CHART_CONFIG_PATH)",
    )
    parser.add_argument(
        "--symbol", "-s",
        type=str,
        default="UNKNOWN",
        help="Symbol used in the signal notification",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output file path for the JSON overlay payload",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


def load_candles(path: Path) -> CandleSeries:
    """Read a candle CSV into a CandleSeries."""
    with open(path, newline="") as f:
        return candles_from_dicts(csv.DictReader(f))


def print_report(candles: CandleSeries, latest: dict[str, float] | None, overlay: ChartOverlay) -> None:
    """Print latest indicator values and the signal to console."""
    print("\n" + "=" * 50)
    print("  INDICATORS")
    print("=" * 50)
    print(f"  Candles: {len(candles)}")
    if len(candles):
        print(f"  Period:  {candles.candles[0].time:%Y-%m-%d %H:%M} → {candles.candles[-1].time:%Y-%m-%d %H:%M}")

    print("\n" + "-" * 50)
    if latest is None:
        print("  Not enough history for every indicator")
    else:
        for name, value in latest.items():
            print(f"  {name:<16} {value:>14.4f}")

    signal = overlay.signal
    print("\n" + "-" * 50)
    print(f"  Signal:   {signal.kind.value.upper()}")
    print(f"  Strength: {signal.strength:.1f}")
    side = side_for_signal(signal.kind)
    if side is not None:
        print(f"  Side:     {side.value}")
    print(f"  {signal.description}")
    print("=" * 50)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = get_settings()
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_chart_config(args.config, settings)
        candles = load_candles(args.candles)
    except (OSError, ValueError, KeyError, yaml.YAMLError) as e:
        logger.error("Failed to load input: %s", e)
        return 1

    service = IndicatorService(config)
    overlay = service.build_overlay(candles)
    print_report(candles, service.latest_values(candles), overlay)

    notification = build_signal_notification(args.symbol, overlay.signal)
    if notification is not None:
        print(f"\n  Notification: {notification.title}")

    if args.output:
        args.output.write_bytes(orjson.dumps(overlay.to_payload()))
        logger.info("Saved overlay payload to %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
