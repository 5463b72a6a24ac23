"""Chart overlay profile loaded from chart.yaml.

Supports:
- Any number of SMA / EMA overlay lines
- Per-profile indicator periods (falls back to environment settings)
- Missing file: settings defaults, SMA 20/50, EMA 12/26
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from app.config import Settings, get_settings
from core.models.config import IndicatorConfig

logger = logging.getLogger(__name__)


class ChartConfig(BaseModel):
    """Top-level chart.yaml configuration."""

    sma_periods: list[int] = Field(default_factory=lambda: [20, 50])
    ema_periods: list[int] = Field(default_factory=lambda: [12, 26])
    indicators: IndicatorConfig = Field(default_factory=IndicatorConfig)

    @field_validator("sma_periods", "ema_periods")
    @classmethod
    def _validate_periods(cls, periods: list[int]) -> list[int]:
        for period in periods:
            if period < 1:
                raise ValueError(f"overlay periods must be >= 1, got {period}")
        if len(set(periods)) != len(periods):
            raise ValueError(f"overlay periods must be unique, got {periods}")
        return periods


def load_chart_config(path: Path | None = None, settings: Settings | None = None) -> ChartConfig:
    """Load chart config from YAML file.

    Falls back to defaults if the file doesn't exist. Indicator periods
    missing from the file come from the environment settings.
    """
    settings = settings or get_settings()
    config_path = path or settings.chart_config_path

    if not config_path.exists():
        logger.info("No chart.yaml found at %s, using defaults", config_path)
        return ChartConfig(indicators=settings.indicator_config())

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level, got {type(raw).__name__}")
    overrides = raw.get("indicators") or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"{config_path}: indicators must be a mapping, got {type(overrides).__name__}")

    indicators = settings.indicator_config().model_dump()
    indicators.update(overrides)
    raw["indicators"] = indicators

    config = ChartConfig.model_validate(raw)
    logger.info(
        "Loaded chart config: %d SMA lines, %d EMA lines, MACD %d/%d/%d",
        len(config.sma_periods),
        len(config.ema_periods),
        config.indicators.macd_fast,
        config.indicators.macd_slow,
        config.indicators.macd_signal,
    )
    return config
