"""Candlestick pattern screening steps"""

from core.interfaces.steps import BaseStep, insufficient_data, load_candles, truthy_check
from core.models.market_data import Stock
from domain.indicators.patterns import is_bullish_candle


class BullishCandleStep(BaseStep):
    """Latest candle(s) form a solid, hammer, engulfing or piercing pattern"""

    @property
    def name(self) -> str:
        return "Bullish candle screener"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        candles = load_candles(self.cache, strategy_name, self.name, stock)
        if candles is None:
            return False

        if not candles:
            return insufficient_data(strategy_name, self.name, stock)

        return truthy_check(strategy_name, self.name, stock, lambda: is_bullish_candle(candles))
