"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
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

__all__ = [
    "ema",
    "sma",
    "rsi",
    "rsi_aligned",
    "bollinger_bands",
    "macd",
    "atr",
    "true_range",
    "IndicatorCalculator",
]
