"""Candle (OHLCV bar) data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Candle(BaseModel):
    """One OHLCV bar."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @model_validator(mode="after")
    def _check_range(self):
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) must be >= low ({self.low})")
        return self


class CandleSeries(BaseModel):
    """Candles in non-decreasing time order."""

    model_config = ConfigDict(frozen=True)

    candles: list[Candle] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_order(self):
        for prev, cur in zip(self.candles, self.candles[1:]):
            if cur.time < prev.time:
                raise ValueError(
                    f"candles must be in time order: {cur.time.isoformat()} "
                    f"follows {prev.time.isoformat()}"
                )
        return self

    def get_opens(self) -> list[float]:
        """Get list of open prices."""
        return [c.open for c in self.candles]

    def get_highs(self) -> list[float]:
        """Get list of high prices."""
        return [c.high for c in self.candles]

    def get_lows(self) -> list[float]:
        """Get list of low prices."""
        return [c.low for c in self.candles]

    def get_closes(self) -> list[float]:
        """Get list of close prices."""
        return [c.close for c in self.candles]

    def get_volumes(self) -> list[float]:
        """Get list of volumes."""
        return [c.volume for c in self.candles]

    def get_times(self) -> list[datetime]:
        return [c.time for c in self.candles]

    def __len__(self) -> int:
        return len(self.candles)
