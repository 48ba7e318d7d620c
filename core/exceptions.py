"""
Screener exception hierarchy

Adapters raise these typed errors; orchestration layers catch them per
stock / per step, log with context, and move on.
"""


class ScreenerError(Exception):
    """Base class for all screener errors"""


class CacheMissError(ScreenerError):
    """Candle series requested before it was populated"""

    def __init__(self, symbol: str):
        super().__init__(f"unexpected cache miss: {symbol}")
        self.symbol = symbol


class InvalidCandleSeriesError(ScreenerError):
    """Candle series violates ordering / volume invariants"""


class CandleStoreError(ScreenerError):
    """Durable candle store failed to read or write"""


class MarketDataError(ScreenerError):
    """Market-data provider returned a failed or malformed response"""


class ReferenceDataError(ScreenerError):
    """Reference listing could not be fetched or parsed"""


class ChannelClosedError(ScreenerError):
    """Send on (or re-close of) a closed channel"""
