from abc import ABC, abstractmethod

from core.models.market_data import Candle, Stock


class BaseCandleCache(ABC):
    """
    Abstract interface for the per-run candle cache

    Implementations:
    - CandleCache (in-process map guarded by a reader/writer lock)
    """

    @abstractmethod
    def populate(self, stock: Stock) -> None:
        """
        Load a stock's stored history into the cache

        Raises:
            CandleStoreError: If the history could not be read
        """

    @abstractmethod
    def get(self, stock: Stock) -> list[Candle]:
        """
        Cached series for a stock

        Raises:
            CacheMissError: If populate() was not called first
        """

    @abstractmethod
    def purge(self, stock: Stock) -> None:
        """Drop a stock's series; purging an absent stock is a no-op"""
