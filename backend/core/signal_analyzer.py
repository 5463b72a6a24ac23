"""MACD crossover classification for the latest bar.

Signal Logic:
- BULLISH: MACD crosses above the signal line
  (prev_macd <= prev_signal and macd > signal)
- BEARISH: MACD crosses below the signal line
  (prev_macd >= prev_signal and macd < signal)
- NEUTRAL: anything else, including warm-up bars where either line is NaN

Strength = min(|histogram| * 10, 100) on the latest bar.

This module is pure business logic with no I/O dependencies.
"""

import logging
import math
from typing import Sequence

from core.models.indicator import MACDResult
from core.models.signal import Signal, SignalKind

logger = logging.getLogger(__name__)

MIN_POINTS = 3
STRENGTH_SCALE = 10.0
MAX_STRENGTH = 100.0

INSUFFICIENT_DATA = "Insufficient data"
BULLISH_DESCRIPTION = "MACD bullish crossover"
BEARISH_DESCRIPTION = "MACD bearish crossover"
NEUTRAL_DESCRIPTION = "No clear MACD signal"


def _strength(histogram_value: float) -> float:
    if math.isnan(histogram_value):
        return 0.0
    return min(abs(histogram_value) * STRENGTH_SCALE, MAX_STRENGTH)


def analyze_macd_signal(
    macd: Sequence[float],
    signal: Sequence[float],
    histogram: Sequence[float],
) -> Signal:
    """
    Classify the latest bar of a MACD triad.

    Args:
        macd: MACD line, oldest first
        signal: Signal line, aligned with macd
        histogram: Histogram, aligned with macd

    Returns:
        Signal; neutral with strength 0 when macd or signal has fewer
        than 3 points
    """
    if len(macd) < MIN_POINTS or len(signal) < MIN_POINTS:
        return Signal(kind=SignalKind.NEUTRAL, strength=0.0, description=INSUFFICIENT_DATA)

    current_macd = macd[-1]
    current_signal = signal[-1]
    previous_macd = macd[-2]
    previous_signal = signal[-2]
    current_histogram = histogram[-1] if len(histogram) else float("nan")

    # Bullish is checked first and wins any tie between the two conditions
    if previous_macd <= previous_signal and current_macd > current_signal:
        strength = _strength(current_histogram)
        logger.debug(
            "Bullish MACD crossover: macd=%.6f signal=%.6f strength=%.2f",
            current_macd, current_signal, strength,
        )
        return Signal(kind=SignalKind.BULLISH, strength=strength, description=BULLISH_DESCRIPTION)

    if previous_macd >= previous_signal and current_macd < current_signal:
        strength = _strength(current_histogram)
        logger.debug(
            "Bearish MACD crossover: macd=%.6f signal=%.6f strength=%.2f",
            current_macd, current_signal, strength,
        )
        return Signal(kind=SignalKind.BEARISH, strength=strength, description=BEARISH_DESCRIPTION)

    return Signal(kind=SignalKind.NEUTRAL, strength=0.0, description=NEUTRAL_DESCRIPTION)


def analyze_macd_result(result: MACDResult) -> Signal:
    """Classify the latest bar of a MACDResult."""
    return analyze_macd_signal(result.macd, result.signal, result.histogram)
