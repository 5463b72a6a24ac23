"""Technical indicators for chart overlays and signal analysis.

Every series function returns a ``list[float]`` with the same length as its
input (RSI excepted, see ``rsi``), using NaN for warm-up positions that lack
enough history. Inputs are copied into fresh NumPy arrays and never mutated.
"""

import math
from typing import Sequence, Union

import numpy as np

from core.indicators.series import (
    NAN,
    compact_defined,
    expand_defined,
    nan_series,
    to_array,
    validate_period,
)
from core.models.candle import Candle, CandleSeries
from core.models.config import IndicatorConfig
from core.models.indicator import BandSet, MACDResult

CandleInput = Union[CandleSeries, Sequence[Candle]]


# =============================================================================
# NumPy kernels
# =============================================================================

def _numpy_sma(arr: np.ndarray, period: int) -> np.ndarray:
    """Trailing-window mean; NaN before index period - 1."""
    result = np.full(len(arr), np.nan)
    if len(arr) < period:
        return result

    for i in range(period - 1, len(arr)):
        result[i] = np.mean(arr[i - period + 1 : i + 1])

    return result


def _numpy_ema(arr: np.ndarray, period: int) -> np.ndarray:
    """EMA seeded with the SMA of the first period values."""
    result = np.full(len(arr), np.nan)
    if len(arr) < period:
        return result

    multiplier = 2.0 / (period + 1)
    result[period - 1] = np.mean(arr[:period])

    for i in range(period, len(arr)):
        prev = result[i - 1]
        result[i] = prev + multiplier * (arr[i] - prev)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def _candle_list(candles: CandleInput) -> Sequence[Candle]:
    if isinstance(candles, CandleSeries):
        return candles.candles
    return candles


# =============================================================================
# Public API
# =============================================================================

def sma(series: Sequence[float], period: int) -> list[float]:
    """
    Calculate Simple Moving Average.

    Args:
        series: Price values, oldest first
        period: Window size

    Returns:
        List of SMA values (same length as input, NaN for the first period - 1)
    """
    validate_period(period)
    return _numpy_sma(to_array(series), period).tolist()


def ema(series: Sequence[float], period: int) -> list[float]:
    """
    Calculate Exponential Moving Average.

    multiplier = 2 / (period + 1); the value at index period - 1 is the SMA
    of the first period inputs.

    Args:
        series: Price values, oldest first
        period: EMA period

    Returns:
        List of EMA values (same length as input, with NaN for initial values)
    """
    validate_period(period)
    return _numpy_ema(to_array(series), period).tolist()


def rsi(series: Sequence[float], period: int = 14) -> list[float]:
    """
    Calculate Relative Strength Index with Wilder's smoothing.

    The output is not padded to the input length: it holds
    ``len(series) - period`` values (at least one for non-empty input), and
    output[j] belongs to input[period + j]. The first entry is always NaN
    because the seed averages are not turned into an RSI value. Use
    ``rsi_aligned`` for an input-length series.

    Args:
        series: Close prices, oldest first
        period: Lookback period (default 14)

    Returns:
        List of RSI values in [0, 100]
    """
    validate_period(period)
    arr = to_array(series)
    if len(arr) == 0:
        return []

    result = [NAN]
    if len(arr) <= period:
        return result

    changes = np.diff(arr)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)

    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    for i in range(period, len(changes)):
        avg_gain = (avg_gain * (period - 1) + float(gains[i])) / period
        avg_loss = (avg_loss * (period - 1) + float(losses[i])) / period
        result.append(_rsi_value(avg_gain, avg_loss))

    return result


def rsi_aligned(series: Sequence[float], period: int = 14) -> list[float]:
    """RSI left-padded with NaN to the input length."""
    values = rsi(series, period)
    n = len(series)
    if n <= period:
        return nan_series(n)
    return nan_series(period) + values


def bollinger_bands(
    series: Sequence[float],
    period: int = 20,
    std_dev_multiplier: float = 2.0,
) -> BandSet:
    """
    Calculate Bollinger Bands.

    middle = SMA(period)
    upper/lower = middle +/- multiplier * population standard deviation

    Args:
        series: Price values, oldest first
        period: SMA / deviation window (default 20)
        std_dev_multiplier: Band width in standard deviations (default 2)

    Returns:
        BandSet with upper, middle and lower series
    """
    validate_period(period)
    arr = to_array(series)
    middle = _numpy_sma(arr, period)
    upper = np.full(len(arr), np.nan)
    lower = np.full(len(arr), np.nan)

    for i in range(period - 1, len(arr)):
        window = arr[i - period + 1 : i + 1]
        mean = middle[i]
        sigma = math.sqrt(float(np.mean((window - mean) ** 2)))
        upper[i] = mean + sigma * std_dev_multiplier
        lower[i] = mean - sigma * std_dev_multiplier

    return BandSet(upper=upper.tolist(), middle=middle.tolist(), lower=lower.tolist())


def macd(
    series: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    Calculate MACD (Moving Average Convergence Divergence).

    MACD Line = Fast EMA - Slow EMA (defined where both EMAs are)
    Signal Line = EMA of the defined MACD values only
    Histogram = MACD Line - Signal Line

    The signal EMA runs over (index, value) pairs of the defined MACD
    entries and is scattered back by index, so all three lines stay aligned
    to the input even if undefined entries are not a single leading run.

    Args:
        series: Close prices, oldest first
        fast_period: Fast EMA period (default 12)
        slow_period: Slow EMA period (default 26)
        signal_period: Signal line EMA period (default 9)

    Returns:
        MACDResult with macd, signal and histogram series
    """
    validate_period(fast_period, "fast_period")
    validate_period(slow_period, "slow_period")
    validate_period(signal_period, "signal_period")

    arr = to_array(series)
    n = len(arr)

    macd_arr = _numpy_ema(arr, fast_period) - _numpy_ema(arr, slow_period)
    macd_line = macd_arr.tolist()

    pairs = compact_defined(macd_line)
    compact = np.array([value for _, value in pairs], dtype=np.float64)
    signal_values = _numpy_ema(compact, signal_period).tolist()
    signal_line = expand_defined(pairs, signal_values, n)

    histogram = (macd_arr - np.array(signal_line, dtype=np.float64)).tolist()

    return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)


def true_range(candles: CandleInput) -> list[float]:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))
    The first bar has no previous close and uses high - low.

    Args:
        candles: Candles, oldest first

    Returns:
        List of True Range values
    """
    bars = _candle_list(candles)
    if len(bars) == 0:
        return []

    result = [bars[0].high - bars[0].low]

    for prev, cur in zip(bars, bars[1:]):
        hl = cur.high - cur.low
        hc = abs(cur.high - prev.close)
        lc = abs(cur.low - prev.close)
        result.append(max(hl, hc, lc))

    return result


def atr(candles: CandleInput, period: int = 14) -> list[float]:
    """
    Calculate Average True Range (ATR).

    ATR is the EMA (multiplier 2 / (period + 1), SMA seed) of the True Range
    series, not Wilder's RMA.

    Args:
        candles: Candles, oldest first
        period: ATR period (default 14)

    Returns:
        List of ATR values (same length as input)
    """
    validate_period(period)
    tr = true_range(candles)
    return _numpy_ema(to_array(tr), period).tolist()


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for every indicator of a candle series.

    Holds only an immutable IndicatorConfig, so one instance can be shared.
    """

    def __init__(self, config: IndicatorConfig | None = None):
        self.config = config or IndicatorConfig()

    def calculate_all(self, candles: CandleInput) -> dict[str, list[float]]:
        """
        Calculate all indicators for the given candles.

        Args:
            candles: Candles, oldest first

        Returns:
            Dict of indicator name -> series aligned to the candles
        """
        cfg = self.config
        closes = [c.close for c in _candle_list(candles)]

        bands = bollinger_bands(closes, cfg.bollinger_period, cfg.bollinger_std_dev)
        macd_result = macd(closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)

        return {
            "sma": sma(closes, cfg.sma_period),
            "ema": ema(closes, cfg.ema_period),
            "rsi": rsi_aligned(closes, cfg.rsi_period),
            "bb_upper": bands.upper,
            "bb_middle": bands.middle,
            "bb_lower": bands.lower,
            "macd": macd_result.macd,
            "macd_signal": macd_result.signal,
            "macd_histogram": macd_result.histogram,
            "atr": atr(candles, cfg.atr_period),
        }

    def calculate_latest(self, candles: CandleInput) -> dict[str, float] | None:
        """
        Calculate indicators for the latest bar only.

        Args:
            candles: Candles, oldest first (need config.min_history bars)

        Returns:
            Dict with indicator values for the latest bar, or None if not enough data
        """
        if len(_candle_list(candles)) < self.config.min_history:
            return None

        all_indicators = self.calculate_all(candles)
        return {name: values[-1] for name, values in all_indicators.items()}
