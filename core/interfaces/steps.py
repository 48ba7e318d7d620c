"""
Abstract interface for screening steps

A step is one indicator-based pass/fail test over a stock's cached series.
Steps are stateless and may be screened from many threads at once.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from core.exceptions import CacheMissError
from core.interfaces.cache import BaseCandleCache
from core.models.market_data import Candle, Stock

logger = logging.getLogger(__name__)


class BaseStep(ABC):
    """
    Screening step interface

    Implementations:
    - RSIStep, EMAStep, EMACrossoverStep (domain/steps/)
    - BollingerBandsStep, VolumeStep, LiquidityLevelsStep, BullishCandleStep

    Implementations call the module helpers (load_candles,
    insufficient_data, truthy_check) so that every step fails closed and
    logs the same way.
    """

    def __init__(self, cache: BaseCandleCache):
        self.cache = cache

    @property
    @abstractmethod
    def name(self) -> str:
        """Step name used in log lines"""

    @abstractmethod
    def screen(self, strategy_name: str, stock: Stock) -> bool:
        """
        Run the step against a stock

        Returns:
            True if the stock passes; False on failure, missing data or error
        """


def load_candles(
    cache: BaseCandleCache, strategy_name: str, step_name: str, stock: Stock
) -> list[Candle] | None:
    """Cached series, or None (logged) on a cache miss"""
    try:
        return cache.get(stock)
    except CacheMissError as e:
        logger.error(f"[{strategy_name} - {step_name}] {e}")
        return None


def insufficient_data(strategy_name: str, step_name: str, stock: Stock) -> bool:
    """Log a data-insufficiency skip and fail closed"""
    logger.info(f"[{strategy_name} - {step_name}] insufficient candles: {stock.symbol}")
    return False


def truthy_check(
    strategy_name: str, step_name: str, stock: Stock, test: Callable[[], bool]
) -> bool:
    """
    Apply a step's test, failing closed on error

    Args:
        test: Zero-argument callable evaluating the step's condition

    Returns:
        Result of test(), or False if it raised
    """
    try:
        passed = bool(test())
    except Exception as e:
        logger.error(
            f"[{strategy_name} - {step_name}] test raised for {stock.symbol}: {e}",
            exc_info=True,
        )
        return False

    if not passed:
        logger.debug(f"[{strategy_name} - {step_name}] test failed: {stock.symbol}")
    return passed
