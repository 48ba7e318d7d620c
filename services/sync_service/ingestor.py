"""
Ingestor - rate-limited candle backfill

For each stock, fetches only the days after its last stored candle up to
today and appends them to the store. A single producer throttles how fast
stocks reach the worker pool so outbound API calls stay under RPS.
"""

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from core.interfaces.candle_store import BaseCandleStore
from core.interfaces.market_data import BaseMarketDataAPI
from core.models.market_data import Stock
from core.utils.concurrency import Channel
from core.utils.dates import backfill_window

logger = logging.getLogger(__name__)


class IngestionSummary(BaseModel):
    """Outcome of one ingestion batch"""

    succeeded: int = 0
    failed: int = 0
    candles: int = 0


class Ingestor:
    """
    Backfill worker pool with a throttled producer

    Example:
        >>> ingestor = Ingestor(store, api, rps=4, workers=4, tz=ZoneInfo("Asia/Kolkata"))
        >>> summary = ingestor.ingest(stocks)
        >>> print(summary.succeeded, summary.failed)
    """

    def __init__(
        self,
        store: BaseCandleStore,
        market_data: BaseMarketDataAPI,
        rps: int,
        workers: int = 4,
        queue_size: int = 100,
        tz: ZoneInfo | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        """
        Initialize ingestor

        Args:
            store: Durable candle store
            market_data: Historical candle client
            rps: Max stocks released to workers per second (>= 1)
            workers: Ingestion worker threads
            queue_size: Capacity of the work queue
            tz: Market timezone for day boundaries
            now: Clock override for the backfill window
        """
        if rps < 1:
            raise ValueError(f"rps must be >= 1, got {rps}")
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.store = store
        self.market_data = market_data
        self.rps = rps
        self.workers = workers
        self.queue_size = queue_size
        self.tz = tz or ZoneInfo("Asia/Kolkata")
        self.now = now

        self._lock = threading.Lock()
        self._summary = IngestionSummary()

    def backfill(self, stock: Stock) -> int:
        """
        Fetch and store the missing days for one stock

        Returns:
            Number of candles inserted (0 if already up to date)
        """
        last = self.store.get_last_candle_timestamp(stock.symbol)
        now = self.now() if self.now else None
        start, end = backfill_window(last, self.tz, now)
        if start >= end:
            logger.debug(f"{stock.symbol} is up to date")
            return 0

        candles = self.market_data.fetch_daily_candles(stock, start, end)
        if not candles:
            logger.debug(f"No new candles for {stock.symbol}")
            return 0

        return self.store.bulk_insert_candles(stock.symbol, candles)

    def ingest(self, stocks: list[Stock]) -> IngestionSummary:
        """
        Backfill every stock, releasing at most `rps` stocks per second

        Per-stock failures are logged and counted, never retried.
        """
        self._summary = IngestionSummary()
        queue = Channel(maxsize=self.queue_size)
        started = time.monotonic()

        threads = [
            threading.Thread(
                target=self._worker, args=(queue,), name=f"ingestion-worker-{i}", daemon=True
            )
            for i in range(self.workers)
        ]
        for thread in threads:
            thread.start()

        try:
            self._produce(stocks, queue)
        finally:
            queue.close()
            for thread in threads:
                thread.join()

        elapsed = time.monotonic() - started
        logger.info(
            f"✅ Ingestion complete in {elapsed:.2f}s: {self._summary.succeeded} successful, "
            f"{self._summary.failed} failed, {self._summary.candles} candles"
        )
        return self._summary

    def _produce(self, stocks: list[Stock], queue: Channel) -> None:
        window_start = time.monotonic()
        for i, stock in enumerate(stocks):
            queue.put(stock)
            if (i + 1) % self.rps == 0:
                remaining = 1.0 - (time.monotonic() - window_start)
                if remaining > 0:
                    time.sleep(remaining)
                window_start = time.monotonic()

    def _worker(self, queue: Channel) -> None:
        for stock in queue:
            try:
                inserted = self.backfill(stock)
            except Exception as e:
                logger.error(f"✗ Ingestion failed for {stock.symbol}: {e}")
                with self._lock:
                    self._summary.failed += 1
                continue

            with self._lock:
                self._summary.succeeded += 1
                self._summary.candles += inserted
            if inserted:
                logger.info(f"✓ Backfilled {inserted} candles for {stock.symbol}")
