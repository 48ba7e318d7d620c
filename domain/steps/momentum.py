"""Momentum screening steps"""

from collections.abc import Callable

from core.interfaces.cache import BaseCandleCache
from core.interfaces.steps import BaseStep, insufficient_data, load_candles, truthy_check
from core.models.market_data import Stock
from domain.indicators.momentum import compute_rsi


class RSIStep(BaseStep):
    """
    RSI screener

    The test receives the full RSI series (oldest first).

    Example:
        >>> step = RSIStep(cache, test=lambda rsi: 40 <= rsi[-1] <= 60)
    """

    def __init__(
        self,
        cache: BaseCandleCache,
        test: Callable[[list[float]], bool],
        period: int = 14,
    ):
        super().__init__(cache)
        self.test = test
        self.period = period

    @property
    def name(self) -> str:
        return "RSI screener"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        rsi = compute_rsi(candles, self.period)
        if not rsi:
            return insufficient_data(strategy_name, self.name, stock)

        return truthy_check(strategy_name, self.name, stock, lambda: self.test(rsi))
