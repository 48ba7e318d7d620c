"""Momentum breakout strategies"""

import math

from core.interfaces.steps import BaseStep
from core.interfaces.strategies import BaseStrategy
from domain.steps import BollingerBandsStep, BullishCandleStep, EMACrossoverStep, EMAStep, RSIStep

DEFAULT_EMA_STACK = [5, 13, 26, 50, 200]


def emas_stacked(emas: list[list[float]]) -> bool:
    """
    Latest EMA values are non-increasing from fastest to slowest

    An empty series counts as +inf.
    """
    prev = math.inf
    for ema in emas:
        current = ema[-1] if ema else math.inf
        if prev < current:
            return False
        prev = current
    return True


class BullishMomentum(BaseStrategy):
    """
    Strong momentum with trend alignment

    Steps:
    1. Bullish candle pattern
    2. RSI crosses above rsi_threshold (prev <= 60 < cur)
    3. Close above EMA(trend_period)
    4. High above the upper Bollinger Band
    5. EMA stack 5 >= 13 >= 26 >= 50 >= 200
    """

    def __init__(
        self,
        *args,
        rsi_threshold: float = 60.0,
        trend_period: int = 50,
        ema_stack: list[int] | None = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.rsi_threshold = rsi_threshold
        self.trend_period = trend_period
        self.ema_stack = ema_stack or list(DEFAULT_EMA_STACK)

    @property
    def default_name(self) -> str:
        return "Bullish Momentum"

    def _rsi_breakout(self, rsi: list[float]) -> bool:
        if len(rsi) < 2:
            return False
        return rsi[-2] <= self.rsi_threshold < rsi[-1]

    def build_steps(self) -> list[BaseStep]:
        return [
            BullishCandleStep(self.cache),
            RSIStep(self.cache, test=self._rsi_breakout),
            EMAStep(
                self.cache,
                period=self.trend_period,
                test=lambda candles, ema: candles[-1].close > ema[-1],
            ),
            BollingerBandsStep(
                self.cache,
                test=lambda candles, _sma, _lower, upper: candles[-1].high > upper[-1],
            ),
            EMACrossoverStep(self.cache, periods=self.ema_stack, test=emas_stacked),
        ]
