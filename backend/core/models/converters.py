"""Converters from ingestion formats to candle models.

Two upstream shapes are supported:
- exchange kline rows: ``[open_time_ms, open, high, low, close, volume, ...]``
  with numeric values possibly encoded as strings
- chart records: ``{"time": unix_seconds, "open": ..., "volume": ...}``
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Sequence

from core.models.candle import Candle, CandleSeries

_RECORD_FIELDS = ("time", "open", "high", "low", "close")


# =============================================================================
# Timestamp conversion helpers
# =============================================================================

def datetime_to_timestamp(dt: datetime) -> float:
    """Convert datetime to Unix timestamp."""
    return dt.timestamp()


def timestamp_to_datetime(ts: float) -> datetime:
    """Convert Unix timestamp to UTC datetime."""
    return datetime.fromtimestamp(ts, tz=timezone.utc)


# =============================================================================
# Candle conversions
# =============================================================================

def candle_from_row(row: Sequence[Any]) -> Candle:
    """Build a Candle from an exchange kline row.

    Args:
        row: [open_time_ms, open, high, low, close, volume, ...]; extra
            trailing fields are ignored

    Returns:
        Candle with UTC time
    """
    if len(row) < 6:
        raise ValueError(f"kline row needs at least 6 fields, got {len(row)}")
    return Candle(
        time=timestamp_to_datetime(float(row[0]) / 1000),
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
        volume=float(row[5]),
    )


def candles_from_rows(rows: Iterable[Sequence[Any]]) -> CandleSeries:
    """Build a CandleSeries from exchange kline rows."""
    return CandleSeries(candles=[candle_from_row(row) for row in rows])


def parse_time(value: Any) -> datetime:
    """Parse unix seconds (number or numeric string), ISO-8601 text, or datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return timestamp_to_datetime(float(value))

    text = str(value).strip()
    try:
        return timestamp_to_datetime(float(text))
    except ValueError:
        pass
    dt = datetime.fromisoformat(text)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def candle_from_dict(data: Mapping[str, Any]) -> Candle:
    """Build a Candle from a chart record (``time`` as unix seconds or ISO-8601).

    ``volume`` may be omitted, but a field that is present must hold a value
    (csv.DictReader fills the cells of a short row with None).
    """
    fields = _RECORD_FIELDS + (("volume",) if "volume" in data else ())
    empty = [name for name in fields if data.get(name) is None]
    if empty:
        raise ValueError(f"candle record has no value for: {', '.join(empty)}")

    return Candle(
        time=parse_time(data["time"]),
        open=float(data["open"]),
        high=float(data["high"]),
        low=float(data["low"]),
        close=float(data["close"]),
        volume=float(data.get("volume", 0.0)),
    )


def candles_from_dicts(records: Iterable[Mapping[str, Any]]) -> CandleSeries:
    """Build a CandleSeries from chart records."""
    return CandleSeries(candles=[candle_from_dict(r) for r in records])


def candle_to_dict(candle: Candle) -> dict[str, float]:
    """Convert a Candle back to a chart record."""
    return {
        "time": datetime_to_timestamp(candle.time),
        "open": candle.open,
        "high": candle.high,
        "low": candle.low,
        "close": candle.close,
        "volume": candle.volume,
    }
