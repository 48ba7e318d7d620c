"""Bollinger Band reversal strategies"""

from core.interfaces.steps import BaseStep
from core.interfaces.strategies import BaseStrategy
from domain.indicators.patterns import lower_band_flat_or_v_shape
from domain.steps import BollingerBandsStep, BullishCandleStep


class LowerBollingerBandBullish(BaseStrategy):
    """
    Bullish reversal at lower Bollinger Band support

    Flat lower band: price found a stable floor.
    V-shaped lower band: a bounce from the floor has started.
    """

    @property
    def default_name(self) -> str:
        return "Lower Bollinger Band Bullish"

    def build_steps(self) -> list[BaseStep]:
        return [
            BullishCandleStep(self.cache),
            BollingerBandsStep(
                self.cache,
                test=lambda candles, sma, lower, _: lower_band_flat_or_v_shape(
                    candles, sma, lower
                ),
            ),
        ]
