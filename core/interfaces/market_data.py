"""
Abstract interfaces for external data providers

- BaseMarketDataAPI: historical daily candles
- BaseReferenceDataAPI: exchange listing of tradable instruments
"""

from abc import ABC, abstractmethod
from datetime import date, datetime

from core.models.market_data import Candle, ReferenceRecord, Stock


class BaseMarketDataAPI(ABC):
    """
    Abstract interface for historical market data

    Implementations:
    - GrowwRestAPI (providers/groww/rest_api.py)
    """

    @abstractmethod
    def fetch_daily_candles(self, stock: Stock, start: datetime, end: datetime) -> list[Candle]:
        """
        Fetch daily candles in [start, end)

        Args:
            stock: Stock to fetch (exchange/segment select the market)
            start: First day to include (midnight, market timezone)
            end: Day after the last day to include

        Returns:
            Candles ascending by timestamp; empty when start >= end

        Raises:
            MarketDataError: On transport failure or non-success status
        """

    @abstractmethod
    def close(self) -> None:
        """Release HTTP resources"""


class BaseReferenceDataAPI(ABC):
    """
    Abstract interface for the published instrument listing

    Implementations:
    - NSEBhavcopyAPI (providers/nse/bhavcopy.py)
    """

    @abstractmethod
    def fetch_latest_listing(self) -> tuple[list[ReferenceRecord], date]:
        """
        Fetch the most recent listing, probing back over non-trading days

        Returns:
            (records filtered to plain equities, trading day of the listing)

        Raises:
            ReferenceDataError: If no listing was found within the probe window
        """

    @abstractmethod
    def close(self) -> None:
        """Release HTTP resources"""
