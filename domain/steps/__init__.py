"""
Screening steps

Each step binds one indicator family to a test supplied by a strategy.
"""

from domain.steps.liquidity import LiquidityLevelsStep
from domain.steps.momentum import RSIStep
from domain.steps.moving_averages import EMACrossoverStep, EMAStep, VolumeStep
from domain.steps.patterns import BullishCandleStep
from domain.steps.volatility import BollingerBandsStep

__all__ = [
    "BollingerBandsStep",
    "BullishCandleStep",
    "EMACrossoverStep",
    "EMAStep",
    "LiquidityLevelsStep",
    "RSIStep",
    "VolumeStep",
]
