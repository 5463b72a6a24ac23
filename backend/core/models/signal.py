"""Classified trade signal model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SignalKind(str, Enum):
    """Direction of a classified signal."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Signal(BaseModel):
    """Classification of the most recent bar.

    Derived on demand from indicator series and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    kind: SignalKind
    strength: float = Field(ge=0.0, le=100.0)
    description: str

    @property
    def is_bullish(self) -> bool:
        return self.kind == SignalKind.BULLISH

    @property
    def is_bearish(self) -> bool:
        return self.kind == SignalKind.BEARISH

    @property
    def is_actionable(self) -> bool:
        """True for bullish or bearish crossovers."""
        return self.kind != SignalKind.NEUTRAL
