"""
Abstract interface for screening strategies

A strategy is an AND-combination of steps plus an output sink of matching
stocks. Each strategy's sink has exactly one producer path (execute) and
one consumer (the aggregator's collector).
"""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, wait

from core.interfaces.cache import BaseCandleCache
from core.interfaces.steps import BaseStep
from core.models.market_data import Stock
from core.utils.concurrency import Channel

logger = logging.getLogger(__name__)

DEFAULT_SINK_SIZE = 100


class BaseStrategy(ABC):
    """
    Strategy interface

    Implementations:
    - BullishSwing, LowerBollingerBandBullish, EMAFakeBreakdown,
      FakeBreakdown, RSIEntersBullishSwingZone, BullishMomentum
      (domain/strategies/)

    Subclasses only describe their steps; execute() runs them through
    run_steps() and forwards matches to the sink.
    """

    def __init__(
        self,
        cache: BaseCandleCache,
        step_executor: ThreadPoolExecutor | None = None,
        sink_size: int = DEFAULT_SINK_SIZE,
        name: str | None = None,
    ):
        """
        Initialize strategy

        Args:
            cache: Candle cache the steps read from
            step_executor: Shared pool for step tasks (a private pool per
                           execute() call if None)
            sink_size: Capacity of the output sink
            name: Custom display name. If None, uses the strategy default.
        """
        self.cache = cache
        self.step_executor = step_executor
        self.sink_size = sink_size
        self._name = name
        self._sink: Channel | None = None
        self._sink_lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name or self.default_name

    @property
    @abstractmethod
    def default_name(self) -> str:
        """Name reported when no custom name is configured"""

    @abstractmethod
    def build_steps(self) -> list[BaseStep]:
        """Ordered steps that must all pass"""

    def get_sink(self) -> Channel:
        """Output sink, created on first use"""
        with self._sink_lock:
            if self._sink is None:
                self._sink = Channel(maxsize=self.sink_size)
            return self._sink

    def execute(self, stock: Stock) -> bool:
        """
        Screen a stock and forward it to the sink on a match

        Returns:
            True if every step passed
        """
        matched = run_steps(self.name, stock, self.build_steps(), self.step_executor)
        if matched:
            self.get_sink().put(stock)
        return matched


def run_steps(
    strategy_name: str,
    stock: Stock,
    steps: list[BaseStep],
    executor: ThreadPoolExecutor | None = None,
) -> bool:
    """
    Run every step concurrently and AND the results

    All steps run to completion; a failing step does not cancel its siblings.
    An empty step list is vacuously true.

    Args:
        strategy_name: Name used in step log lines
        stock: Stock being screened
        steps: Steps to run
        executor: Pool to run step tasks on (private pool if None)

    Returns:
        True if every step returned True
    """
    if not steps:
        return True

    if executor is None:
        with ThreadPoolExecutor(max_workers=len(steps)) as private:
            return run_steps(strategy_name, stock, steps, private)

    futures = [executor.submit(step.screen, strategy_name, stock) for step in steps]
    wait(futures)

    result = True
    for step, future in zip(steps, futures):
        error = future.exception()
        if error is not None:
            logger.error(f"[{strategy_name} - {step.name}] step raised for {stock.symbol}: {error}")
            result = False
        elif not future.result():
            result = False
    return result
