"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models.config import IndicatorConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="INDICATORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Chart overlay profile (YAML); missing file = defaults
    chart_config_path: Path = Path(__file__).parent.parent / "chart.yaml"

    # Indicator defaults
    sma_period: int = 20
    ema_period: int = 20
    rsi_period: int = 14
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    atr_period: int = 14

    def indicator_config(self) -> IndicatorConfig:
        """Build the validated indicator configuration."""
        return IndicatorConfig(
            sma_period=self.sma_period,
            ema_period=self.ema_period,
            rsi_period=self.rsi_period,
            bollinger_period=self.bollinger_period,
            bollinger_std_dev=self.bollinger_std_dev,
            macd_fast=self.macd_fast,
            macd_slow=self.macd_slow,
            macd_signal=self.macd_signal,
            atr_period=self.atr_period,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
