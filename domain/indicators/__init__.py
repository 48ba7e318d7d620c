"""
Technical indicators module

Pure functions over an ascending candle series:
- Moving averages: compute_ema, compute_volume_ma
- Momentum: compute_rsi
- Volatility: compute_bollinger_bands
- Liquidity: compute_liquidity_levels
- Patterns: is_bullish_candle, lower_band_flat_or_v_shape
"""

from domain.indicators.liquidity import compute_liquidity_levels
from domain.indicators.momentum import compute_rsi
from domain.indicators.moving_averages import compute_ema, compute_volume_ma
from domain.indicators.patterns import is_bullish_candle, lower_band_flat_or_v_shape
from domain.indicators.volatility import compute_bollinger_bands

__all__ = [
    "compute_ema",
    "compute_volume_ma",
    "compute_rsi",
    "compute_bollinger_bands",
    "compute_liquidity_levels",
    "is_bullish_candle",
    "lower_band_flat_or_v_shape",
]
