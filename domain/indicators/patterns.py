"""
Candlestick and band-shape patterns

Implementations:
- Single candle: solid bullish body, hammer
- Two candle: bullish engulfing, piercing line
- Lower Bollinger Band flat or V-shape
"""

import logging

from core.models.market_data import Candle

logger = logging.getLogger(__name__)

FLAT_SLOPE_THRESHOLD = 0.0001


def is_solid(candle: Candle) -> bool:
    """
    Strong bullish body with short wicks

    body >= 60% of range, each wick <= 25% of body
    """
    if candle.open >= candle.close:
        return False

    body = candle.close - candle.open
    upper_wick = candle.high - candle.close
    lower_wick = candle.open - candle.low
    total_range = candle.high - candle.low

    if body >= 0.6 * total_range and upper_wick <= 0.25 * body and lower_wick <= 0.25 * body:
        logger.debug(f"Solid bullish candle: {candle.symbol}")
        return True
    return False


def is_hammer(candle: Candle) -> bool:
    """Bullish body with a lower wick at least twice its size and a short upper wick"""
    if candle.open >= candle.close:
        return False

    body = candle.close - candle.open
    upper_wick = candle.high - candle.close
    lower_wick = candle.open - candle.low

    if lower_wick < 2 * body or upper_wick > 0.25 * body or upper_wick > body:
        return False

    logger.debug(f"Hammer candle: {candle.symbol}")
    return True


def is_engulfing(previous: Candle, current: Candle) -> bool:
    """Bearish candle followed by a bullish candle whose body covers it"""
    if previous.close >= previous.open or current.close <= current.open:
        return False

    if current.open <= previous.close and current.close >= previous.open:
        logger.debug(f"Engulfing pattern: {current.symbol}")
        return True
    return False


def is_piercing(previous: Candle, current: Candle) -> bool:
    """Bearish candle followed by a bullish gap-down that closes above its midpoint"""
    if previous.close >= previous.open or current.close <= current.open:
        return False

    midpoint = (previous.open + previous.close) / 2
    if current.open < previous.close and current.close > midpoint:
        logger.debug(f"Piercing pattern: {current.symbol}")
        return True
    return False


def is_bullish_candle(candles: list[Candle]) -> bool:
    """
    Any bullish reversal pattern on the latest candle(s)

    Returns:
        False for an empty series
    """
    if not candles:
        return False

    last = candles[-1]
    if is_solid(last) or is_hammer(last):
        return True

    if len(candles) >= 2:
        previous = candles[-2]
        return is_engulfing(previous, last) or is_piercing(previous, last)
    return False


def lower_band_flat_or_v_shape(candles: list[Candle], sma: list[float], lower: list[float]) -> bool:
    """
    Lower Bollinger Band has flattened or turned up

    Only considered while the latest candle's body is still at or below the
    SMA. Slopes are taken over the last three lower-band points.

    Args:
        candles: Ascending candle series
        sma: Bollinger middle band
        lower: Bollinger lower band (at least 3 points)

    Returns:
        True if both slopes are within the flat threshold, or the band
        fell then rose (V-shape)
    """
    if not candles or not sma or len(lower) < 3:
        return False

    last = candles[-1]
    body_top = max(last.open, last.close)
    if body_top > sma[-1]:
        return False

    y1, y2, y3 = lower[-3], lower[-2], lower[-1]
    slope1 = y2 - y1
    slope2 = y3 - y2

    is_flat = abs(slope1) < FLAT_SLOPE_THRESHOLD and abs(slope2) < FLAT_SLOPE_THRESHOLD
    is_v_shape = slope1 < 0 and slope2 > 0
    return is_flat or is_v_shape
