"""Volatility screening steps"""

from collections.abc import Callable

from core.interfaces.cache import BaseCandleCache
from core.interfaces.steps import BaseStep, insufficient_data, load_candles, truthy_check
from core.models.market_data import Candle, Stock
from domain.indicators.volatility import compute_bollinger_bands

BandsTest = Callable[[list[Candle], list[float], list[float], list[float]], bool]


class BollingerBandsStep(BaseStep):
    """
    Bollinger Bands screener

    test(candles, sma, lower, upper). min_points guarantees at least three
    band points for shape tests.
    """

    def __init__(
        self,
        cache: BaseCandleCache,
        test: BandsTest,
        period: int = 20,
        k: float = 2.0,
        min_points: int = 22,
    ):
        super().__init__(cache)
        self.test = test
        self.period = period
        self.k = k
        self.min_points = min_points

    @property
    def name(self) -> str:
        return "Bollinger Bands screener"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        if len(candles) < max(self.min_points, self.period):
            return insufficient_data(strategy_name, self.name, stock)

        sma, lower, upper = compute_bollinger_bands(candles, self.period, self.k)
        return truthy_check(
            strategy_name, self.name, stock, lambda: self.test(candles, sma, lower, upper)
        )
