"""
Moving average indicators

Implementations:
- EMA: Exponential Moving Average (SMA-seeded)
- Volume MA: rolling mean of volume

All functions take an ascending candle series and return values aligned to
the tail of the input: index 0 is the first candle where the indicator is
defined.
"""

import numpy as np
import talib

from core.models.market_data import Candle


def defined_tail(values: np.ndarray) -> list[float]:
    """Drop TA-Lib's leading NaN lookback"""
    return [float(v) for v in values[~np.isnan(values)]]


def compute_ema(candles: list[Candle], period: int) -> list[float]:
    """
    Exponential Moving Average of close

    Formula: EMA = α × Close + (1-α) × EMA_prev
    where α = 2 / (period + 1), seeded with the SMA of the first period closes

    Returns:
        len(candles) - period + 1 values, or [] if len(candles) < period

    Example:
        >>> compute_ema(candles, period=50)[-1]
        2451.37
    """
    if period <= 0 or len(candles) < period:
        return []

    closes = np.array([float(c.close) for c in candles], dtype=np.float64)
    # TA-Lib rejects timeperiod < 2; EMA(1) is the close itself
    if period == 1:
        return closes.tolist()

    return defined_tail(talib.EMA(closes, timeperiod=period))


def compute_volume_ma(candles: list[Candle], period: int = 20) -> list[float]:
    """
    Rolling mean of volume

    Returns:
        len(candles) - period + 1 values, or [] if len(candles) < period
    """
    if period <= 0 or len(candles) < period:
        return []

    volumes = np.array([float(c.volume) for c in candles], dtype=np.float64)
    if period == 1:
        return volumes.tolist()

    return defined_tail(talib.SMA(volumes, timeperiod=period))
