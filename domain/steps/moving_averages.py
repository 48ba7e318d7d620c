"""
Moving-average screening steps

- EMAStep: test over one EMA series
- EMACrossoverStep: test over several EMA series
- VolumeStep: latest volume vs its rolling average
"""

import logging
from collections.abc import Callable

from core.interfaces.cache import BaseCandleCache
from core.interfaces.steps import BaseStep, insufficient_data, load_candles, truthy_check
from core.models.market_data import Candle, Stock
from domain.indicators.moving_averages import compute_ema, compute_volume_ma

logger = logging.getLogger(__name__)


class EMAStep(BaseStep):
    """
    EMA screener

    Example:
        >>> step = EMAStep(cache, period=50, test=lambda candles, ema: candles[-1].close > ema[-1])
    """

    def __init__(
        self,
        cache: BaseCandleCache,
        period: int,
        test: Callable[[list[Candle], list[float]], bool],
    ):
        super().__init__(cache)
        self.period = period
        self.test = test

    @property
    def name(self) -> str:
        return f"EMA {self.period} screener"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        ema = compute_ema(candles, self.period)
        if not ema:
            return insufficient_data(strategy_name, self.name, stock)

        return truthy_check(strategy_name, self.name, stock, lambda: self.test(candles, ema))


class EMACrossoverStep(BaseStep):
    """EMA crossover screener: fails closed if any period lacks data"""

    def __init__(
        self,
        cache: BaseCandleCache,
        periods: list[int],
        test: Callable[[list[list[float]]], bool],
    ):
        super().__init__(cache)
        self.periods = periods
        self.test = test

    @property
    def name(self) -> str:
        return "EMA crossover"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        emas = []
        for period in self.periods:
            ema = compute_ema(candles, period)
            if not ema:
                logger.info(
                    f"[{strategy_name} - {self.name}] insufficient candles for "
                    f"EMA {period}: {stock.symbol}"
                )
                return False
            emas.append(ema)

        return truthy_check(strategy_name, self.name, stock, lambda: self.test(emas))


class VolumeStep(BaseStep):
    """Volume screener: test(current_volume, average_volume)"""

    def __init__(
        self,
        cache: BaseCandleCache,
        test: Callable[[float, float], bool],
        period: int = 20,
    ):
        super().__init__(cache)
        self.test = test
        self.period = period

    @property
    def name(self) -> str:
        return "Volume screener"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        volume_ma = compute_volume_ma(candles, self.period)
        if not volume_ma:
            return insufficient_data(strategy_name, self.name, stock)

        current = float(candles[-1].volume)
        return truthy_check(
            strategy_name, self.name, stock, lambda: self.test(current, volume_ma[-1])
        )
