"""
Configuration loader with YAML support and Pydantic validation
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_STRATEGIES_PATH = "config/providers/strategies.yaml"


class StrategyConfig(BaseModel):
    """Single strategy configuration"""

    type: str  # Registry key (bullish_swing, fake_breakdown, ...)
    name: str | None = None  # Custom report name
    enabled: bool = True
    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("type")
    @classmethod
    def type_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Strategy type cannot be blank")
        return v.strip()


class StrategiesConfig(BaseModel):
    """All strategies configuration"""

    strategies: list[StrategyConfig]

    @field_validator("strategies")
    @classmethod
    def strategies_not_empty(cls, v):
        if not v:
            raise ValueError("Strategies list cannot be empty")
        return v


def load_strategies_config(config_path: str = DEFAULT_STRATEGIES_PATH) -> list[StrategyConfig]:
    """
    Load and validate strategies configuration from YAML

    Args:
        config_path: Path to strategies.yaml file

    Returns:
        list[StrategyConfig]: Validated strategy configurations, in file order

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config is invalid

    Example:
        >>> configs = load_strategies_config()
        >>> print([c.type for c in configs])
        ['bullish_swing', 'lower_bollinger_band_bullish', ...]
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Strategy config not found: {config_path}")

    with open(config_file) as f:
        data = yaml.safe_load(f) or {}

    try:
        strategies_config = StrategiesConfig(**data)
        logger.info(f"✓ Loaded {len(strategies_config.strategies)} strategy configurations")
        return strategies_config.strategies

    except Exception as e:
        logger.error(f"Failed to load strategy config: {e}")
        raise


def get_enabled_strategies(config_path: str = DEFAULT_STRATEGIES_PATH) -> list[StrategyConfig]:
    """
    Get only enabled strategies from configuration

    Raises:
        ValueError: If every strategy is disabled
    """
    enabled = [c for c in load_strategies_config(config_path) if c.enabled]

    if not enabled:
        raise ValueError("No strategies are enabled in configuration")

    logger.info(f"✓ Enabled strategies: {', '.join(c.name or c.type for c in enabled)}")
    return enabled


__all__ = [
    "StrategyConfig",
    "StrategiesConfig",
    "load_strategies_config",
    "get_enabled_strategies",
]
