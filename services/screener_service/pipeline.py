"""
Screener pipeline - worker pool, feeder and aggregator

Flow:
    Feeder → source channel → N workers (populate → strategies → purge)
           → per-strategy sinks → collectors → report

Shutdown ordering:
1. Feeder is the only writer of `source` and closes it when exhausted
2. Supervisor joins every worker, then sets `workers_done`
3. Coordinator waits on `workers_done`, then closes every sink
4. Reporter joins every collector, logs one line per strategy, sets `completed`

A sink is therefore closed only after all of its producers have returned.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum

from core.interfaces.cache import BaseCandleCache
from core.interfaces.strategies import BaseStrategy
from core.models.market_data import Stock, StrategyResult
from core.utils.concurrency import Channel

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_SIZE = 100
PROGRESS_LOG_EVERY = 100


class PipelineState(str, Enum):
    IDLE = "idle"
    FEEDING = "feeding"
    DRAINING = "draining"
    DONE = "done"


class ScreenerPipeline:
    """
    One screening run over a stock universe

    Strategies are single-run: their sinks are closed at the end of the run.

    Example:
        >>> pipeline = ScreenerPipeline(cache, strategies, workers=4)
        >>> results = pipeline.run(stocks)
        >>> for result in results:
        ...     print(result.summary())
    """

    def __init__(
        self,
        cache: BaseCandleCache,
        strategies: list[BaseStrategy],
        workers: int = 4,
        source_size: int = DEFAULT_SOURCE_SIZE,
    ):
        """
        Initialize pipeline

        Args:
            cache: Candle cache owned by this run
            strategies: Strategies to evaluate for every stock
            workers: Number of stock worker threads
            source_size: Capacity of the source channel
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.cache = cache
        self.strategies = strategies
        self.workers = workers
        self.source = Channel(maxsize=source_size)

        self.state = PipelineState.IDLE
        self.workers_done = threading.Event()
        self.completed = threading.Event()
        self.results: list[StrategyResult] = []

        self.failed_populates = 0
        self.failed_executions = 0

        self._executor = ThreadPoolExecutor(
            max_workers=max(1, workers * max(1, len(strategies))),
            thread_name_prefix="strategy",
        )
        self._stats_lock = threading.Lock()
        self._processed = 0
        self._total = 0
        self._started_at = 0.0
        self._results_by_index: dict[int, StrategyResult] = {}

    # ============================================
    # RUN CONTROL
    # ============================================
    def start(self, stocks: list[Stock]) -> threading.Event:
        """
        Start the run in background threads

        Returns:
            Event set once every strategy's result has been reported
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"pipeline already started (state={self.state.value})")

        for strategy in self.strategies:
            if strategy.get_sink().closed:
                raise RuntimeError(f"sink of '{strategy.name}' is already closed")

        self._total = len(stocks)
        self._started_at = time.monotonic()
        self.state = PipelineState.FEEDING
        logger.info(
            f"🚀 Screening {len(stocks)} stocks with {len(self.strategies)} strategies "
            f"on {self.workers} workers"
        )

        worker_threads = [
            self._spawn(self._worker, f"screener-worker-{i}", i) for i in range(self.workers)
        ]
        self._spawn(self._supervise, "screener-supervisor", worker_threads)

        collectors = [
            self._spawn(self._collect, f"collector-{i}", i, strategy)
            for i, strategy in enumerate(self.strategies)
        ]
        self._spawn(self._coordinate, "sink-coordinator")
        self._spawn(self._report, "screener-reporter", collectors)

        self._spawn(self._feed, "screener-feeder", stocks)
        return self.completed

    def run(self, stocks: list[Stock]) -> list[StrategyResult]:
        """Run to completion and return one result per strategy"""
        self.start(stocks).wait()
        return self.results

    def shutdown(self) -> None:
        """Abandon in-flight work without draining"""
        self._executor.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _spawn(target, name: str, *args) -> threading.Thread:
        thread = threading.Thread(target=target, name=name, args=args, daemon=True)
        thread.start()
        return thread

    # ============================================
    # FEEDER
    # ============================================
    def _feed(self, stocks: list[Stock]) -> None:
        try:
            for stock in stocks:
                self.source.put(stock)
        finally:
            self.state = PipelineState.DRAINING
            self.source.close()

    # ============================================
    # WORKERS
    # ============================================
    def _worker(self, worker_id: int) -> None:
        for stock in self.source:
            try:
                self._process(stock)
            except Exception as e:
                logger.error(
                    f"✗ Worker {worker_id} failed on {stock.symbol}: {e}", exc_info=True
                )
            finally:
                self._mark_processed()

    def _process(self, stock: Stock) -> None:
        try:
            self.cache.populate(stock)
        except Exception as e:
            with self._stats_lock:
                self.failed_populates += 1
            logger.error(f"✗ Skipping {stock.symbol}, cache populate failed: {e}")
            return

        try:
            futures = [
                (strategy, self._executor.submit(strategy.execute, stock))
                for strategy in self.strategies
            ]
            wait([future for _, future in futures])

            for strategy, future in futures:
                error = future.exception()
                if error is not None:
                    with self._stats_lock:
                        self.failed_executions += 1
                    logger.error(f"✗ [{strategy.name}] failed on {stock.symbol}: {error}")
        finally:
            self.cache.purge(stock)

    def _mark_processed(self) -> None:
        with self._stats_lock:
            self._processed += 1
            processed = self._processed
        if processed % PROGRESS_LOG_EVERY == 0 or processed == self._total:
            logger.info(f"Progress: {processed}/{self._total} stocks screened")

    def _supervise(self, worker_threads: list[threading.Thread]) -> None:
        for thread in worker_threads:
            thread.join()
        self.workers_done.set()

    # ============================================
    # AGGREGATOR
    # ============================================
    def _collect(self, index: int, strategy: BaseStrategy) -> None:
        stocks = list(strategy.get_sink())
        self._results_by_index[index] = StrategyResult(strategy=strategy.name, stocks=stocks)

    def _coordinate(self) -> None:
        self.workers_done.wait()
        for strategy in self.strategies:
            strategy.get_sink().close()

    def _report(self, collectors: list[threading.Thread]) -> None:
        for thread in collectors:
            thread.join()

        self.results = [self._results_by_index[i] for i in range(len(self.strategies))]
        for result in self.results:
            logger.info(result.summary())

        elapsed = time.monotonic() - self._started_at
        logger.info(f"✅ Time taken to complete analysis: {elapsed:.2f}s")

        self._executor.shutdown(wait=False)
        self.state = PipelineState.DONE
        self.completed.set()
