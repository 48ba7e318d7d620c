"""Support / resistance screening steps"""

import logging
from collections.abc import Callable

from core.interfaces.cache import BaseCandleCache
from core.interfaces.steps import BaseStep, load_candles, truthy_check
from core.models.market_data import Candle, Stock
from domain.indicators.liquidity import compute_liquidity_levels

logger = logging.getLogger(__name__)

LevelsTest = Callable[[list[Candle], list[float], list[float]], bool]


class LiquidityLevelsStep(BaseStep):
    """
    Liquidity levels screener

    test(candles, supports, resistances)

    Args:
        window: Half-width of the extrema window (> 0)
        tolerance: Relative clustering tolerance (> 0)
        strength: Min touches for a level (> 0)
    """

    def __init__(
        self,
        cache: BaseCandleCache,
        window: int,
        tolerance: float,
        strength: int,
        test: LevelsTest,
    ):
        super().__init__(cache)
        self.window = window
        self.tolerance = tolerance
        self.strength = strength
        self.test = test

    @property
    def name(self) -> str:
        return "Liquidity levels"

    def _invalid_parameter(self) -> str | None:
        if self.window <= 0:
            return f"window size {self.window} is not valid, should be > 0"
        if self.strength <= 0:
            return f"strength {self.strength} is not valid, should be > 0"
        if self.tolerance <= 0:
            return f"tolerance {self.tolerance} is not valid, should be > 0"
        return None

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        error = self._invalid_parameter()
        if error:
            logger.error(f"[{strategy_name} - {self.name}] {error}")
            return False

        supports, resistances = compute_liquidity_levels(
            candles, self.window, self.tolerance, self.strength
        )
        return truthy_check(
            strategy_name, self.name, stock, lambda: self.test(candles, supports, resistances)
        )
