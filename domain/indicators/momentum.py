"""
Momentum indicators

Implementations:
- RSI: Relative Strength Index (Wilder's smoothing)
"""

import numpy as np
import talib

from core.models.market_data import Candle


def compute_rsi(candles: list[Candle], period: int = 14) -> list[float]:
    """
    Relative Strength Index

    Formula: RSI = 100 - (100 / (1 + RS)), RS = avg_gain / avg_loss
    Seed averages cover the first `period` deltas; each later average is
    (prev × (period - 1) + current) / period.

    avg_loss == 0 gives RSI = 100. While no price has moved yet
    (avg_gain == avg_loss == 0) the value is NaN; TA-Lib reports 0 there.

    Returns:
        len(candles) - period values (first one at index `period` of the
        input), or [] if len(candles) < period + 1

    Example:
        >>> compute_rsi(candles)[-1]
        55.42
    """
    if period < 2 or len(candles) < period + 1:
        return []

    closes = np.array([float(c.close) for c in candles], dtype=np.float64)
    rsi = talib.RSI(closes, timeperiod=period)[period:]

    # Value i averages deltas[: period + i]; both averages stay 0 until the first move
    moves = np.flatnonzero(np.diff(closes))
    first_move = int(moves[0]) if moves.size else len(closes) - 1
    rsi[: max(0, first_move - period + 1)] = np.nan

    return [float(v) for v in rsi]
