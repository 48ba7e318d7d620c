"""
Technical data query

Per-candle OHLCV alongside RSI 14, EMA 5/13/26/50 and the 20-day volume MA
for one stock, newest first.
"""

import logging

from core.interfaces.candle_store import BaseCandleStore
from core.models.market_data import TechnicalDataPoint
from core.utils.dates import DATE_FORMAT
from domain.indicators.momentum import compute_rsi
from domain.indicators.moving_averages import compute_ema, compute_volume_ma

logger = logging.getLogger(__name__)

# Marks leading positions where an indicator is not yet defined
UNDEFINED = -1.0


def pad_left(values: list[float], length: int, fill: float = UNDEFINED) -> list[float]:
    """
    Align a tail-aligned indicator series to the full candle count

    Example:
        >>> pad_left([3.0, 4.0], 4)
        [-1.0, -1.0, 3.0, 4.0]
    """
    return [fill] * (length - len(values)) + list(values)


def get_technical_data(store: BaseCandleStore, symbol: str) -> list[TechnicalDataPoint]:
    """
    Full indicator history of one symbol

    Args:
        store: Durable candle store
        symbol: Trading symbol

    Returns:
        One point per stored candle, newest first, values rounded to 2 dp

    Raises:
        ValueError: If symbol is empty
        CandleStoreError: If the store read fails
    """
    if not symbol or not symbol.strip():
        raise ValueError("symbol must not be empty")

    candles = store.fetch_all_candles(symbol.strip())
    total = len(candles)
    logger.debug(f"Computing technical data for {symbol} over {total} candles")

    rsi = pad_left(compute_rsi(candles, 14), total)
    ema5 = pad_left(compute_ema(candles, 5), total)
    ema13 = pad_left(compute_ema(candles, 13), total)
    ema26 = pad_left(compute_ema(candles, 26), total)
    ema50 = pad_left(compute_ema(candles, 50), total)
    volume_ma = pad_left(compute_volume_ma(candles, 20), total)

    points = [
        TechnicalDataPoint(
            date=candle.timestamp.strftime(DATE_FORMAT),
            open=round(candle.open, 2),
            high=round(candle.high, 2),
            low=round(candle.low, 2),
            close=round(candle.close, 2),
            volume=candle.volume,
            rsi=round(rsi[i], 2),
            ema5=round(ema5[i], 2),
            ema13=round(ema13[i], 2),
            ema26=round(ema26[i], 2),
            ema50=round(ema50[i], 2),
            volume_ma=round(volume_ma[i], 2),
        )
        for i, candle in enumerate(candles)
    ]
    points.reverse()
    return points
