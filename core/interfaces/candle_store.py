from abc import ABC, abstractmethod
from datetime import date, datetime

from core.models.market_data import Candle, Stock


class BaseCandleStore(ABC):
    """
    Abstract interface for the durable daily candle store

    Implementations:
    - ClickHouseCandleStore (OLAP, columnar)

    Implementations must be safe to call from many worker threads at once;
    conflicting writes are left to the store to serialize.
    """

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the store"""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create the candle table if it does not exist"""

    @abstractmethod
    def get_last_candle_timestamp(self, symbol: str) -> datetime:
        """
        Timestamp of the newest stored candle for a symbol

        Returns:
            Start of the last stored day, or start of today minus the
            look-back window when nothing is stored yet
        """

    @abstractmethod
    def bulk_insert_candles(self, symbol: str, candles: list[Candle]) -> int:
        """
        Append candles for one symbol

        Returns:
            Number of rows inserted
        """

    @abstractmethod
    def fetch_all_candles(self, symbol: str) -> list[Candle]:
        """Full stored history for a symbol, ascending by timestamp"""

    @abstractmethod
    def fetch_all_symbols(self) -> list[Stock]:
        """Every stock with at least one stored candle"""

    @abstractmethod
    def fetch_symbols_stale_as_of(self, trading_day: date) -> list[Stock]:
        """Stored stocks whose newest candle is not on trading_day"""

    @abstractmethod
    def delete_delisted_symbols(self) -> list[str]:
        """
        Remove stocks that stopped trading

        A stock is delisted when its newest candle is older than the newest
        candle across the whole table.

        Returns:
            Symbols that were deleted
        """

    @abstractmethod
    def close(self) -> None:
        """Close connection"""
