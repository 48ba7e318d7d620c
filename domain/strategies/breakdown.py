"""
Fake breakdown strategies

Price dips below a support during the session but closes back above it,
trapping sellers.

- EMAFakeBreakdown: dynamic support (EMA)
- FakeBreakdown: static support (clustered liquidity levels)
"""

import logging

from core.interfaces.steps import BaseStep
from core.interfaces.strategies import BaseStrategy
from core.models.market_data import Candle
from domain.steps import BullishCandleStep, EMAStep, LiquidityLevelsStep, VolumeStep

logger = logging.getLogger(__name__)


def _volume_confirms(current: float, average: float) -> bool:
    return current >= average


class EMAFakeBreakdown(BaseStrategy):
    """
    Fake breakdown of the EMA

    Steps:
    1. Bullish candle pattern
    2. Latest low < EMA(period) < latest close
    3. Current volume >= 20-period average
    """

    def __init__(self, *args, period: int = 50, **kwargs):
        super().__init__(*args, **kwargs)
        self.period = period

    @property
    def default_name(self) -> str:
        return f"EMA {self.period} Fake Breakdown"

    @staticmethod
    def _reclaimed(candles: list[Candle], ema: list[float]) -> bool:
        last = candles[-1]
        return last.low < ema[-1] < last.close

    def build_steps(self) -> list[BaseStep]:
        return [
            BullishCandleStep(self.cache),
            EMAStep(self.cache, period=self.period, test=self._reclaimed),
            VolumeStep(self.cache, test=_volume_confirms),
        ]


class FakeBreakdown(BaseStrategy):
    """
    Fake breakdown of a liquidity (support) level

    Args:
        window: Extrema lookback (e.g., 5 for recent levels)
        tolerance: Level clustering tolerance (0.01 = 1%)
        strength: Min touches for a level to count
    """

    def __init__(
        self, *args, window: int = 5, tolerance: float = 0.01, strength: int = 3, **kwargs
    ):
        super().__init__(*args, **kwargs)
        self.window = window
        self.tolerance = tolerance
        self.strength = strength

    @property
    def default_name(self) -> str:
        return "Fake Breakdown"

    def _broke_and_reclaimed(
        self, candles: list[Candle], supports: list[float], _resistances: list[float]
    ) -> bool:
        if not supports or not candles:
            return False

        last = candles[-1]
        levels = [level for level in supports if last.low < level < last.close]
        if levels:
            logger.info(f"[{self.name}] {last.symbol} did fake breakdown at levels {levels}")
        return bool(levels)

    def build_steps(self) -> list[BaseStep]:
        return [
            BullishCandleStep(self.cache),
            LiquidityLevelsStep(
                self.cache,
                window=self.window,
                tolerance=self.tolerance,
                strength=self.strength,
                test=self._broke_and_reclaimed,
            ),
            VolumeStep(self.cache, test=_volume_confirms),
        ]
