"""Tests for technical indicators."""

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from core.indicators import (
    ema,
    sma,
    rsi,
    rsi_aligned,
    bollinger_bands,
    macd,
    atr,
    true_range,
    IndicatorCalculator,
)
from core.models import Candle, CandleSeries, IndicatorConfig


def _candle(i: int, high: float, low: float, close: float) -> Candle:
    return Candle(
        time=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=5 * i),
        open=close,
        high=high,
        low=low,
        close=close,
        volume=100.0,
    )


def _trending_candles(n: int = 60) -> CandleSeries:
    """Gentle uptrend with a 1.0 range per bar."""
    candles = []
    for i in range(n):
        close = 100 + i * 0.1 + 0.05
        candles.append(_candle(i, close + 0.5, close - 0.5, close))
    return CandleSeries(candles=candles)


def _wave(n: int = 80) -> list[float]:
    return [100 + 5 * math.sin(i / 4) + i * 0.2 for i in range(n)]


class TestSMA:
    """Tests for SMA calculation."""

    def test_sma_basic(self):
        values = [float(i) for i in range(1, 11)]  # 1-10
        result = sma(values, 3)

        assert len(result) == 10
        assert math.isnan(result[0])
        assert math.isnan(result[1])
        # (1+2+3)/3 = 2, (2+3+4)/3 = 3
        assert result[2] == 2.0
        assert result[3] == 3.0

    def test_sma_matches_naive_window_mean(self):
        values = _wave(50)
        period = 7
        result = sma(values, period)

        for i in range(len(values)):
            if i < period - 1:
                assert math.isnan(result[i])
                continue
            total = 0.0
            for j in range(i - period + 1, i + 1):
                total += values[j]
            assert result[i] == pytest.approx(total / period)

    def test_sma_insufficient_data(self):
        result = sma([1.0, 2.0], 3)

        assert len(result) == 2
        assert all(math.isnan(v) for v in result)

    def test_sma_empty(self):
        assert sma([], 5) == []

    def test_sma_invalid_period(self):
        with pytest.raises(ValueError, match="period"):
            sma([1.0, 2.0, 3.0], 0)
        with pytest.raises(ValueError, match="integer"):
            sma([1.0, 2.0, 3.0], True)


class TestEMA:
    """Tests for EMA calculation."""

    def test_ema_basic(self):
        values = [float(i) for i in range(1, 11)]  # 1-10
        result = ema(values, 5)

        # First 4 values should be NaN
        assert all(math.isnan(v) for v in result[:4])

        # 5th value should be SMA of first 5 = (1+2+3+4+5)/5 = 3
        assert result[4] == 3.0

        # k = 2/6: 3 + (6 - 3) / 3 = 4
        assert result[5] == pytest.approx(4.0)

    def test_ema_seed_equals_sma(self):
        values = _wave(40)
        for period in (3, 9, 14, 26):
            assert ema(values, period)[period - 1] == sma(values, period)[period - 1]

    def test_ema_insufficient_data(self):
        result = ema([100.0, 101.0, 102.0], 10)

        assert len(result) == 3
        assert all(math.isnan(v) for v in result)

    def test_ema_accepts_numpy_input(self):
        arr = np.arange(1.0, 11.0)
        result = ema(arr, 5)

        assert result[4] == 3.0
        assert arr.tolist() == [float(i) for i in range(1, 11)]


class TestRSI:
    """Tests for RSI calculation."""

    def test_rsi_uptrend(self):
        """All gains, no losses -> RSI 100."""
        prices = [100.0 + i for i in range(16)]
        result = rsi(prices, 14)

        assert len(result) == 2
        assert math.isnan(result[0])
        assert result[1] == 100.0

    def test_rsi_downtrend(self):
        """All losses, no gains -> RSI 0."""
        prices = [115.0 - i for i in range(16)]
        result = rsi(prices, 14)

        assert math.isnan(result[0])
        assert result[1] == 0.0

    def test_rsi_long_uptrend_saturates(self):
        prices = [100.0 + i * 0.5 for i in range(60)]
        result = rsi(prices, 14)

        assert all(v == 100.0 for v in result[1:])

    def test_rsi_flat_series_is_100(self):
        result = rsi([50.0] * 20, 5)

        assert result[1:] == [100.0] * (len(result) - 1)

    def test_rsi_wilder_smoothing(self):
        # changes [+1, -1, +1]; seed avg gain 0.5 / loss 0.5
        # next bar: gain (0.5 + 1) / 2 = 0.75, loss 0.5 / 2 = 0.25 -> RS 3 -> 75
        result = rsi([1.0, 2.0, 1.0, 2.0], 2)

        assert len(result) == 2
        assert math.isnan(result[0])
        assert result[1] == pytest.approx(75.0)

    def test_rsi_output_length(self):
        prices = _wave(50)
        assert len(rsi(prices, 14)) == 50 - 14

    def test_rsi_insufficient_data(self):
        result = rsi([100.0, 101.0, 102.0], 14)

        assert len(result) == 1
        assert math.isnan(result[0])

    def test_rsi_empty(self):
        assert rsi([], 14) == []

    def test_rsi_bounds(self):
        result = rsi(_wave(80), 14)
        defined = [v for v in result if not math.isnan(v)]

        assert defined
        assert all(0.0 <= v <= 100.0 for v in defined)

    def test_rsi_aligned_pads_to_input_length(self):
        result = rsi_aligned([1.0, 2.0, 1.0, 2.0], 2)

        assert len(result) == 4
        assert all(math.isnan(v) for v in result[:3])
        assert result[3] == pytest.approx(75.0)

    def test_rsi_aligned_insufficient_data(self):
        result = rsi_aligned([1.0, 2.0, 3.0], 14)

        assert len(result) == 3
        assert all(math.isnan(v) for v in result)


class TestBollingerBands:
    """Tests for Bollinger Bands."""

    def test_population_std_dev(self):
        # mean 3, population variance (4+1+0+1+4)/5 = 2
        bands = bollinger_bands([1.0, 2.0, 3.0, 4.0, 5.0], period=5, std_dev_multiplier=2)

        assert bands.middle[4] == 3.0
        assert bands.upper[4] == pytest.approx(3 + 2 * math.sqrt(2))
        assert bands.lower[4] == pytest.approx(3 - 2 * math.sqrt(2))

    def test_middle_band_is_sma(self):
        values = _wave(60)
        bands = bollinger_bands(values, 20)
        expected = sma(values, 20)

        np.testing.assert_array_equal(bands.middle, expected)

    def test_band_symmetry(self):
        bands = bollinger_bands(_wave(60), 20, 2.5)

        for up, mid, low in zip(bands.upper, bands.middle, bands.lower):
            if math.isnan(mid):
                assert math.isnan(up) and math.isnan(low)
                continue
            assert up - mid == pytest.approx(mid - low)
            assert up >= mid >= low

    def test_shared_warm_up(self):
        bands = bollinger_bands(_wave(30), 20)

        assert len(bands) == 30
        for series in (bands.upper, bands.middle, bands.lower):
            assert all(math.isnan(v) for v in series[:19])
            assert not math.isnan(series[19])

    def test_constant_series_collapses(self):
        bands = bollinger_bands([10.0] * 25, 20)

        assert bands.upper[-1] == bands.middle[-1] == bands.lower[-1] == 10.0


class TestMACD:
    """Tests for MACD indicator."""

    def test_macd_alignment(self):
        prices = [100.0 + i for i in range(50)]
        result = macd(prices, 12, 26, 9)

        assert len(result.macd) == len(result.signal) == len(result.histogram) == 50
        # MACD defined from slow - 1, signal/histogram from slow - 1 + signal - 1
        assert all(math.isnan(v) for v in result.macd[:25])
        assert not math.isnan(result.macd[25])
        assert all(math.isnan(v) for v in result.signal[:33])
        assert all(math.isnan(v) for v in result.histogram[:33])
        assert not math.isnan(result.histogram[33])

    def test_histogram_undefined_where_macd_undefined(self):
        result = macd(_wave(80))

        for m, h in zip(result.macd, result.histogram):
            if math.isnan(m):
                assert math.isnan(h)

    def test_signal_is_ema_of_defined_macd(self):
        result = macd(_wave(80), 12, 26, 9)
        defined = [v for v in result.macd if not math.isnan(v)]
        expected = ema(defined, 9)

        np.testing.assert_array_equal(result.signal[25:], expected)

    def test_histogram_is_macd_minus_signal(self):
        result = macd(_wave(80))

        for m, s, h in zip(result.macd, result.signal, result.histogram):
            if not math.isnan(h):
                assert h == pytest.approx(m - s)

    def test_small_periods(self):
        result = macd([1.0, 2.0, 3.0, 4.0, 5.0], 2, 3, 2)

        assert math.isnan(result.macd[1])
        assert result.macd[2:] == pytest.approx([0.5, 0.5, 0.5])
        assert math.isnan(result.signal[2])
        assert result.signal[3:] == pytest.approx([0.5, 0.5])
        assert result.histogram[3:] == pytest.approx([0.0, 0.0])

    def test_uptrend_macd_positive(self):
        result = macd([100.0 + i for i in range(50)])
        assert result.macd[-1] > 0

    def test_macd_insufficient_data(self):
        result = macd([100.0 + i for i in range(20)])

        assert len(result) == 20
        assert all(math.isnan(v) for v in result.macd)
        assert all(math.isnan(v) for v in result.signal)
        assert all(math.isnan(v) for v in result.histogram)

    def test_macd_invalid_period(self):
        with pytest.raises(ValueError, match="signal_period"):
            macd([1.0] * 40, 12, 26, 0)


class TestATR:
    """Tests for ATR calculation."""

    def test_true_range_first_bar(self):
        assert true_range([_candle(0, 105.0, 95.0, 100.0)]) == [10.0]

    def test_true_range_with_gap_up(self):
        candles = [_candle(0, 101.0, 99.0, 100.0), _candle(1, 115.0, 110.0, 112.0)]
        # |high - prev_close| = 15
        assert true_range(candles)[1] == 15.0

    def test_true_range_with_gap_down(self):
        candles = [_candle(0, 101.0, 99.0, 100.0), _candle(1, 95.0, 90.0, 92.0)]
        # |low - prev_close| = 10
        assert true_range(candles)[1] == 10.0

    def test_atr_identical_candles_is_zero(self):
        candles = [_candle(i, 100.0, 100.0, 100.0) for i in range(20)]
        result = atr(candles, 14)

        assert all(math.isnan(v) for v in result[:13])
        assert all(v == 0.0 for v in result[13:])

    def test_atr_constant_range(self):
        candles = [_candle(i, 102.0, 100.0, 101.0) for i in range(20)]
        result = atr(candles, 9)

        assert len(result) == 20
        assert result[-1] == pytest.approx(2.0)

    def test_atr_uses_ema_smoothing(self):
        # TR = [2, 2, 2, 8]; seed 2, then 2 + 0.5 * (8 - 2) = 5 (Wilder would give 4)
        candles = [_candle(i, 102.0, 100.0, 101.0) for i in range(3)]
        candles.append(_candle(3, 105.0, 97.0, 101.0))

        result = atr(candles, 3)

        assert result[2] == 2.0
        assert result[3] == pytest.approx(5.0)

    def test_atr_accepts_candle_series(self):
        series = _trending_candles(30)
        np.testing.assert_array_equal(atr(series, 14), atr(list(series.candles), 14))

    def test_atr_insufficient_data(self):
        candles = [_candle(i, 102.0, 100.0, 101.0) for i in range(5)]
        result = atr(candles, 9)

        assert len(result) == 5
        assert all(math.isnan(v) for v in result)

    def test_atr_empty(self):
        assert atr([], 14) == []


class TestPurity:
    """Indicators never mutate their input and are deterministic."""

    def test_repeated_calls_identical(self):
        prices = _wave(80)
        original = list(prices)
        candles = _trending_candles(40)

        for fn in (
            lambda: sma(prices, 10),
            lambda: ema(prices, 10),
            lambda: rsi(prices, 14),
            lambda: bollinger_bands(prices, 20).upper,
            lambda: macd(prices).histogram,
            lambda: atr(candles, 14),
        ):
            np.testing.assert_array_equal(fn(), fn())

        assert prices == original


class TestIndicatorCalculator:
    """Tests for IndicatorCalculator class."""

    def test_calculate_all_aligned(self):
        candles = _trending_candles(60)
        result = IndicatorCalculator().calculate_all(candles)

        assert set(result) == {
            "sma", "ema", "rsi", "bb_upper", "bb_middle", "bb_lower",
            "macd", "macd_signal", "macd_histogram", "atr",
        }
        assert all(len(series) == 60 for series in result.values())

    def test_calculate_latest(self):
        calc = IndicatorCalculator(IndicatorConfig())
        result = calc.calculate_latest(_trending_candles(60))

        assert result is not None
        assert all(not math.isnan(v) for v in result.values())
        assert result["atr"] == pytest.approx(1.0, abs=0.01)
        assert result["macd"] > 0

    def test_calculate_latest_insufficient_data(self):
        calc = IndicatorCalculator()
        # default min_history = slow + signal - 1 = 34
        assert calc.calculate_latest(_trending_candles(33)) is None
        assert calc.calculate_latest(_trending_candles(34)) is not None
