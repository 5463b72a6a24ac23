"""Indicator service: candle history -> chart overlays and the latest signal.

Bridges the pure indicator library to presentation consumers. The service
holds only its immutable configuration; every call recomputes from the full
candle history it is given.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.chart_config import ChartConfig
from core.indicators import (
    IndicatorCalculator,
    atr,
    bollinger_bands,
    ema,
    macd,
    rsi_aligned,
    sma,
)
from core.models import BandSet, CandleSeries, MACDResult, Signal
from core.models.converters import datetime_to_timestamp
from core.signal_analyzer import analyze_macd_result

logger = logging.getLogger(__name__)


def _json_series(values: list[float]) -> list[float | None]:
    """Replace NaN with None (JSON has no NaN)."""
    return [None if math.isnan(v) else v for v in values]


@dataclass
class ChartOverlay:
    """Every overlay series for one candle history, aligned to its bars."""

    times: list[datetime]
    rsi: list[float]
    bollinger: BandSet
    macd: MACDResult
    atr: list[float]
    signal: Signal
    sma: dict[int, list[float]] = field(default_factory=dict)
    ema: dict[int, list[float]] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict; times are unix seconds, NaN becomes None."""
        return {
            "time": [datetime_to_timestamp(t) for t in self.times],
            "sma": {str(p): _json_series(v) for p, v in self.sma.items()},
            "ema": {str(p): _json_series(v) for p, v in self.ema.items()},
            "rsi": _json_series(self.rsi),
            "bollinger": {
                "upper": _json_series(self.bollinger.upper),
                "middle": _json_series(self.bollinger.middle),
                "lower": _json_series(self.bollinger.lower),
            },
            "macd": {
                "macd": _json_series(self.macd.macd),
                "signal": _json_series(self.macd.signal),
                "histogram": _json_series(self.macd.histogram),
            },
            "atr": _json_series(self.atr),
            "signal": self.signal.model_dump(mode="json"),
        }


class IndicatorService:
    """Compute chart overlays and MACD signals from candle history."""

    def __init__(self, config: ChartConfig | None = None):
        self.config = config or ChartConfig()
        self._calculator = IndicatorCalculator(self.config.indicators)

    def build_overlay(self, candles: CandleSeries) -> ChartOverlay:
        """Compute every configured overlay for the candles."""
        cfg = self.config.indicators
        closes = candles.get_closes()

        macd_result = macd(closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
        signal = analyze_macd_result(macd_result)

        overlay = ChartOverlay(
            times=candles.get_times(),
            sma={p: sma(closes, p) for p in self.config.sma_periods},
            ema={p: ema(closes, p) for p in self.config.ema_periods},
            rsi=rsi_aligned(closes, cfg.rsi_period),
            bollinger=bollinger_bands(closes, cfg.bollinger_period, cfg.bollinger_std_dev),
            macd=macd_result,
            atr=atr(candles, cfg.atr_period),
            signal=signal,
        )

        logger.debug(
            "Built overlay for %d candles: signal=%s strength=%.1f",
            len(candles), signal.kind.value, signal.strength,
        )
        return overlay

    def latest_values(self, candles: CandleSeries) -> dict[str, float] | None:
        """Latest value of each indicator, or None while warming up."""
        latest = self._calculator.calculate_latest(candles)
        if latest is None:
            logger.info(
                "Not enough history for latest values: %d candles, need %d",
                len(candles), self.config.indicators.min_history,
            )
        return latest

    def latest_signal(self, candles: CandleSeries) -> Signal:
        """Classify the most recent bar of the candles."""
        cfg = self.config.indicators
        result = macd(candles.get_closes(), cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
        return analyze_macd_result(result)
