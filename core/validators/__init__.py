"""
Validators module

Data quality validators for candle series
"""

from core.validators.market_data import CandleSeriesValidator

__all__ = ["CandleSeriesValidator"]
