"""
Volatility indicators

Implementations:
- Bollinger Bands: SMA ± k × population standard deviation
"""

import math

from core.models.market_data import Candle


def compute_bollinger_bands(
    candles: list[Candle], period: int = 20, k: float = 2.0
) -> tuple[list[float], list[float], list[float]]:
    """
    Bollinger Bands of close

    The mean uses a running sum; variance is recomputed exactly per window.

    Returns:
        (sma, lower, upper), each len(candles) - period + 1 long,
        or three empty lists if len(candles) < period

    Example:
        >>> sma, lower, upper = compute_bollinger_bands(candles)
        >>> lower[-1] < sma[-1] < upper[-1]
        True
    """
    if period <= 0 or len(candles) < period:
        return [], [], []

    closes = [c.close for c in candles]
    sma: list[float] = []
    lower: list[float] = []
    upper: list[float] = []

    total = 0.0
    for i, close in enumerate(closes):
        total += close
        if i + 1 >= period:
            mean = total / period
            window = closes[i + 1 - period : i + 1]
            variance = sum((x - mean) ** 2 for x in window) / period
            std_dev = math.sqrt(variance)

            sma.append(mean)
            lower.append(mean - k * std_dev)
            upper.append(mean + k * std_dev)
            total -= closes[i + 1 - period]

    return sma, lower, upper
