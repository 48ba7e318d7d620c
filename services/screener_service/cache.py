"""
Candle Cache - per-run, in-process candle series store

Populated before and purged after each stock's analysis, so peak memory is
bounded by the number of stocks in flight rather than the universe size.
"""

import logging

from core.exceptions import CacheMissError, CandleStoreError
from core.interfaces.cache import BaseCandleCache
from core.interfaces.candle_store import BaseCandleStore
from core.models.market_data import Candle, Stock
from core.utils.concurrency import ReadWriteLock
from core.validators.market_data import CandleSeriesValidator

logger = logging.getLogger(__name__)


class CandleCache(BaseCandleCache):
    """
    Symbol → candle series map guarded by one reader/writer lock

    get() calls share the lock; populate()/purge() take it exclusively.
    The store round trip in populate() happens outside the lock.
    """

    def __init__(self, store: BaseCandleStore, validator: CandleSeriesValidator | None = None):
        self.store = store
        self.validator = validator or CandleSeriesValidator()
        self._series: dict[str, list[Candle]] = {}
        self._lock = ReadWriteLock()

    def populate(self, stock: Stock) -> None:
        """
        Load a stock's stored history

        Raises:
            CandleStoreError: If the store read failed or returned an invalid series
        """
        try:
            candles = self.store.fetch_all_candles(stock.symbol)
            candles = self.validator.normalize(candles) if candles else []
        except CandleStoreError:
            raise
        except Exception as e:
            raise CandleStoreError(f"failed to load candles for {stock.symbol}: {e}") from e

        with self._lock.write_locked():
            self._series[stock.symbol] = candles
        logger.debug(f"populated {stock.symbol} in cache ({len(candles)} candles)")

    def get(self, stock: Stock) -> list[Candle]:
        with self._lock.read_locked():
            candles = self._series.get(stock.symbol)
        if candles is None:
            raise CacheMissError(stock.symbol)
        return candles

    def purge(self, stock: Stock) -> None:
        with self._lock.write_locked():
            removed = self._series.pop(stock.symbol, None)
        if removed is not None:
            logger.debug(f"purged {stock.symbol} from cache")

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._series)

    def __contains__(self, stock: Stock) -> bool:
        with self._lock.read_locked():
            return stock.symbol in self._series
