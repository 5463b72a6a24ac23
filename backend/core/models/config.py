"""Indicator configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IndicatorConfig(BaseModel):
    """Indicator periods and multipliers."""

    model_config = ConfigDict(frozen=True)

    sma_period: int = Field(default=20, ge=1)
    ema_period: int = Field(default=20, ge=1)
    rsi_period: int = Field(default=14, ge=1)

    # Bollinger Bands
    bollinger_period: int = Field(default=20, ge=1)
    bollinger_std_dev: float = Field(default=2.0, gt=0)

    # MACD
    macd_fast: int = Field(default=12, ge=1)
    macd_slow: int = Field(default=26, ge=1)
    macd_signal: int = Field(default=9, ge=1)

    atr_period: int = Field(default=14, ge=1)

    @model_validator(mode="after")
    def _validate(self):
        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"macd_fast ({self.macd_fast}) must be less than macd_slow ({self.macd_slow})"
            )
        return self

    @property
    def min_history(self) -> int:
        """Bars needed before every indicator has a defined latest value.

        RSI's first defined value sits at index rsi_period + 1 and the MACD
        histogram needs the slow EMA warm-up plus the signal warm-up.
        """
        return max(
            self.sma_period,
            self.ema_period,
            self.rsi_period + 2,
            self.bollinger_period,
            self.macd_slow + self.macd_signal - 1,
            self.atr_period,
        )
