"""Domain models - Pydantic schemas for candles, stocks and results"""

from core.models.market_data import (
    Candle,
    CandlesResponse,
    ReferenceRecord,
    Stock,
    StrategyResult,
    TechnicalDataPoint,
)

__all__ = [
    "Candle",
    "CandlesResponse",
    "ReferenceRecord",
    "Stock",
    "StrategyResult",
    "TechnicalDataPoint",
]
