"""
Indicator Service - Technical data queries

Computes aligned indicator series (RSI, EMA, volume MA) over a stock's
stored candles for inspection outside a screening run.
"""

from services.indicator_service.technical_data import get_technical_data

__all__ = ["get_technical_data"]
