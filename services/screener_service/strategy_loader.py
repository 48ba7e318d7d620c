"""
Strategy Loader - Load strategies from config

Responsibility: Bridge between config layer and domain layer
- Load strategy configs (config layer)
- Use StrategyRegistry to create instances (domain layer)
- Bind them to this run's cache and step executor
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from config.loader import DEFAULT_STRATEGIES_PATH, get_enabled_strategies
from core.interfaces.cache import BaseCandleCache
from core.interfaces.strategies import DEFAULT_SINK_SIZE, BaseStrategy
from domain.strategies.registry import StrategyRegistry

logger = logging.getLogger(__name__)


class StrategyLoader:
    """Load strategies from YAML config using registry"""

    @staticmethod
    def load(
        cache: BaseCandleCache,
        step_executor: ThreadPoolExecutor | None = None,
        sink_size: int = DEFAULT_SINK_SIZE,
        config_path: str = DEFAULT_STRATEGIES_PATH,
    ) -> list[BaseStrategy]:
        """
        Instantiate every enabled strategy

        Returns:
            Strategies in config order

        Raises:
            ValueError: If no strategy could be created

        Example:
            >>> strategies = StrategyLoader.load(cache, step_executor)
            >>> [s.name for s in strategies]
            ['Bullish Swing', 'Lower Bollinger Band Bullish', ...]
        """
        strategies: list[BaseStrategy] = []

        for config in get_enabled_strategies(config_path):
            params = dict(config.params)
            if config.name:
                params["name"] = config.name

            try:
                strategy = StrategyRegistry.create(
                    config.type, cache, step_executor, sink_size, **params
                )
                strategies.append(strategy)
                logger.debug(f"  ✓ Loaded {strategy.name}")

            except (ValueError, TypeError) as e:
                logger.warning(f"  ✗ Skipping {config.type}: {e}")

        if not strategies:
            raise ValueError("No strategies could be loaded from configuration")

        logger.info(f"✓ Loaded {len(strategies)} strategies: {[s.name for s in strategies]}")
        return strategies
