"""
Swing strategies

- BullishSwing: bullish candle with balanced RSI, volume support and a
  flattening / turning lower Bollinger Band
- RSIEntersBullishSwingZone: RSI crossing up into the swing zone
"""

import logging

from core.interfaces.steps import BaseStep
from core.interfaces.strategies import BaseStrategy
from core.models.market_data import Stock
from domain.indicators.patterns import lower_band_flat_or_v_shape
from domain.steps import BollingerBandsStep, BullishCandleStep, RSIStep, VolumeStep

logger = logging.getLogger(__name__)


class BullishSwing(BaseStrategy):
    """
    Bullish swing setup

    Steps:
    1. Bullish candle pattern on the latest candle(s)
    2. Current volume >= 20-period average volume
    3. Latest RSI(14) within [rsi_low, rsi_high] (default 40-60)
    4. Lower Bollinger Band flat or V-shaped
    """

    def __init__(self, *args, rsi_low: float = 40.0, rsi_high: float = 60.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.rsi_low = rsi_low
        self.rsi_high = rsi_high

    @property
    def default_name(self) -> str:
        return "Bullish Swing"

    def build_steps(self) -> list[BaseStep]:
        return [
            BullishCandleStep(self.cache),
            VolumeStep(self.cache, test=lambda current, average: current >= average),
            RSIStep(self.cache, test=lambda rsi: self.rsi_low <= rsi[-1] <= self.rsi_high),
            BollingerBandsStep(
                self.cache,
                test=lambda candles, sma, lower, _: lower_band_flat_or_v_shape(
                    candles, sma, lower
                ),
            ),
        ]


class RSIEntersBullishSwingZone(BaseStrategy):
    """
    RSI crossing up through the baseline into the swing zone

    Matches when prev <= baseline <= cur <= upper_bound and RSI is rising.
    Invalid bounds (zero, or baseline above upper bound) never match.
    """

    def __init__(self, *args, baseline: float = 40.0, upper_bound: float = 60.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.baseline = baseline
        self.upper_bound = upper_bound

    @property
    def default_name(self) -> str:
        return "RSI Enters Bullish Swing Zone"

    def bounds_error(self) -> str | None:
        if self.baseline == 0:
            return "baseline cannot be zero"
        if self.upper_bound == 0:
            return "upper bound cannot be zero"
        if self.baseline > self.upper_bound:
            return f"baseline {self.baseline} > upper bound {self.upper_bound}"
        return None

    def _entered_zone(self, rsi: list[float]) -> bool:
        if len(rsi) < 2:
            return False
        prev, cur = rsi[-2], rsi[-1]
        return self.baseline <= cur <= self.upper_bound and prev <= self.baseline and cur > prev

    def build_steps(self) -> list[BaseStep]:
        return [
            BullishCandleStep(self.cache),
            RSIStep(self.cache, test=self._entered_zone),
        ]

    def execute(self, stock: Stock) -> bool:
        error = self.bounds_error()
        if error:
            logger.error(f"[{self.name}] {error}")
            return False
        return super().execute(stock)
