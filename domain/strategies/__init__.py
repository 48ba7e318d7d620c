"""
Screening strategies module

Exports:
- BaseStrategy (core/interfaces/strategies.py)
- Swing: BullishSwing, RSIEntersBullishSwingZone
- Bollinger: LowerBollingerBandBullish
- Breakdown: EMAFakeBreakdown, FakeBreakdown
- Momentum: BullishMomentum
- Registry: StrategyRegistry
"""

from core.interfaces.strategies import BaseStrategy
from domain.strategies.bollinger import LowerBollingerBandBullish
from domain.strategies.breakdown import EMAFakeBreakdown, FakeBreakdown
from domain.strategies.momentum import BullishMomentum
from domain.strategies.registry import StrategyRegistry
from domain.strategies.swing import BullishSwing, RSIEntersBullishSwingZone

__all__ = [
    "BaseStrategy",
    "BullishSwing",
    "RSIEntersBullishSwingZone",
    "LowerBollingerBandBullish",
    "EMAFakeBreakdown",
    "FakeBreakdown",
    "BullishMomentum",
    "StrategyRegistry",
]
