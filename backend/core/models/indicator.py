"""Multi-line indicator result bundles."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BandSet:
    """Volatility envelope: three parallel series of equal length."""

    upper: list[float]
    middle: list[float]
    lower: list[float]

    def __len__(self) -> int:
        return len(self.middle)


@dataclass(frozen=True, slots=True)
class MACDResult:
    """MACD triad aligned to the input length.

    Attributes:
        macd: Fast EMA - Slow EMA (NaN until both EMAs are defined).
        signal: EMA of the defined MACD values, scattered back to their indices.
        histogram: macd - signal (NaN wherever either side is NaN).
    """

    macd: list[float]
    signal: list[float]
    histogram: list[float]

    def __len__(self) -> int:
        return len(self.macd)
