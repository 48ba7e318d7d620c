"""
Screener Service - Daily equity screening

Per run:
1. Loads each stock's candles into a shared cache
2. Evaluates every enabled strategy concurrently
3. Collects matches per strategy and reports them
"""

from services.screener_service.cache import CandleCache
from services.screener_service.pipeline import PipelineState, ScreenerPipeline
from services.screener_service.strategy_loader import StrategyLoader

__all__ = ["CandleCache", "PipelineState", "ScreenerPipeline", "StrategyLoader"]
