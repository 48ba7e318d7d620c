"""
Strategy registry for managing and creating strategies

Factory pattern for strategy creation
"""

from core.interfaces.strategies import BaseStrategy
from domain.strategies.bollinger import LowerBollingerBandBullish
from domain.strategies.breakdown import EMAFakeBreakdown, FakeBreakdown
from domain.strategies.momentum import BullishMomentum
from domain.strategies.swing import BullishSwing, RSIEntersBullishSwingZone


class StrategyRegistry:
    """
    Registry for strategy creation

    Maps the `type` key used in strategies.yaml to strategy classes
    """

    _strategies: dict[str, type[BaseStrategy]] = {
        "bullish_swing": BullishSwing,
        "lower_bollinger_band_bullish": LowerBollingerBandBullish,
        "ema_fake_breakdown": EMAFakeBreakdown,
        "fake_breakdown": FakeBreakdown,
        "rsi_enters_bullish_swing_zone": RSIEntersBullishSwingZone,
        "bullish_momentum": BullishMomentum,
    }

    @classmethod
    def create(cls, strategy_type: str, *args, **params) -> BaseStrategy:
        """
        Create strategy by type

        Args:
            strategy_type: Strategy type (bullish_swing, fake_breakdown, ...)
            *args: Positional constructor args (cache, step_executor)
            **params: Strategy parameters (including optional 'name')

        Returns:
            Strategy instance

        Raises:
            ValueError: If strategy type is not found

        Example:
            >>> StrategyRegistry.create("fake_breakdown", cache, window=5, tolerance=0.01)
        """
        strategy_class = cls._strategies.get(strategy_type.lower())
        if not strategy_class:
            available = ", ".join(cls.list_strategies())
            raise ValueError(f"Unknown strategy: {strategy_type}. Available: {available}")

        return strategy_class(*args, **params)

    @classmethod
    def register(cls, name: str, strategy_class: type[BaseStrategy]) -> None:
        """Register a new strategy type"""
        cls._strategies[name.lower()] = strategy_class

    @classmethod
    def list_strategies(cls) -> list[str]:
        """
        List all available strategy types

        Example:
            >>> StrategyRegistry.list_strategies()
            ['bullish_momentum', 'bullish_swing', 'ema_fake_breakdown', ...]
        """
        return sorted(cls._strategies.keys())
