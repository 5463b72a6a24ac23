"""Data models shared by the indicator engine and the application layer."""

from core.models.candle import Candle, CandleSeries
from core.models.config import IndicatorConfig
from core.models.indicator import BandSet, MACDResult
from core.models.signal import Signal, SignalKind

__all__ = [
    "Candle",
    "CandleSeries",
    "IndicatorConfig",
    "BandSet",
    "MACDResult",
    "Signal",
    "SignalKind",
]
