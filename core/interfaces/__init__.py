"""Interfaces module - Abstract base classes for stores, providers, steps and strategies"""

from .cache import BaseCandleCache
from .candle_store import BaseCandleStore
from .market_data import BaseMarketDataAPI, BaseReferenceDataAPI
from .steps import BaseStep
from .strategies import BaseStrategy

__all__ = [
    "BaseCandleCache",
    "BaseCandleStore",
    "BaseMarketDataAPI",
    "BaseReferenceDataAPI",
    "BaseStep",
    "BaseStrategy",
]
