"""
Screener Service - One screening run over the listed-equity universe

Flow:
1. Connect to ClickHouse, ensure schema
2. Resolve the universe (NSE listing or fixed YAML list)
3. Optionally sync missing candles first
4. Screen every stock with every enabled strategy (worker pool + cache)
5. Report matches per strategy, then delete delisted stocks

SIGINT/SIGTERM abandon the run without draining in-flight work.
"""

import logging
import os
import signal
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings
from factory.client_factory import create_candle_store, create_market_data_client
from services.screener_service.cache import CandleCache
from services.screener_service.pipeline import ScreenerPipeline
from services.screener_service.strategy_loader import StrategyLoader
from services.sync_service.sync import resolve_universe, sync_candles

# Configure logging
os.makedirs("data/logs", exist_ok=True)

_fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_level = get_settings().log_level

_console = logging.StreamHandler(sys.stdout)
_console.setLevel(_level)
_console.setFormatter(logging.Formatter(_fmt))

_file = RotatingFileHandler(
    "data/logs/screener_service_errors.log",
    maxBytes=5 * 1024 * 1024,  # 5MB
    backupCount=3,
)
_file.setLevel(logging.ERROR)
_file.setFormatter(logging.Formatter(_fmt))

logging.basicConfig(level=_level, handlers=[_console, _file])
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

WAIT_POLL_SECONDS = 0.2


class ScreenerService:
    """
    Screener Service - sync, screen, report, clean up.

    The pipeline runs in background threads; the main thread races its
    completion against an interrupt signal.
    """

    def __init__(self):
        self.settings = get_settings()
        self.interrupted = threading.Event()

        logger.info("🔧 Initializing clients...")
        self.store = create_candle_store()
        self.pipeline: ScreenerPipeline | None = None
        self.step_executor: ThreadPoolExecutor | None = None

    def start(self) -> int:
        """Run once; returns the process exit code"""
        logger.info("=" * 60)
        logger.info("Screener Service started")
        logger.info("=" * 60)
        logger.info(f"  ClickHouse: {self.settings.clickhouse_address}")
        logger.info(f"  Workers: {self.settings.SCREENER_WORKERS}")
        logger.info(f"  Step workers: {self.settings.SCREENER_STEP_WORKERS}")
        logger.info(f"  Strategies: {self.settings.STRATEGIES_CONFIG_PATH}")
        logger.info("=" * 60)

        try:
            self.store.connect()
            self.store.ensure_schema()
            logger.info("✓ Connected to ClickHouse")

            universe, trading_day = resolve_universe(self.settings)
            if not universe:
                logger.warning("⚠️ Empty universe, nothing to screen")
                return EXIT_OK

            if self.settings.SCREENER_SYNC_BEFORE_RUN:
                self._sync(universe, trading_day)

            if self.interrupted.is_set():
                return EXIT_INTERRUPTED

            if not self._screen(universe):
                return EXIT_INTERRUPTED

            if self.settings.SCREENER_DELETE_DELISTED:
                self.store.delete_delisted_symbols()

            return EXIT_OK

        except Exception as e:
            logger.error(f"Error in screener service: {e}", exc_info=True)
            return EXIT_FAILURE
        finally:
            self.stop()

    def _sync(self, universe, trading_day) -> None:
        market_data = create_market_data_client()
        try:
            sync_candles(self.settings, self.store, market_data, universe, trading_day)
        finally:
            market_data.close()

    def _screen(self, universe) -> bool:
        """Run the pipeline; False if interrupted before completion"""
        self.step_executor = ThreadPoolExecutor(
            max_workers=self.settings.SCREENER_STEP_WORKERS, thread_name_prefix="step"
        )
        cache = CandleCache(self.store)
        strategies = StrategyLoader.load(
            cache,
            self.step_executor,
            sink_size=self.settings.SCREENER_SINK_SIZE,
            config_path=self.settings.STRATEGIES_CONFIG_PATH,
        )
        self.pipeline = ScreenerPipeline(
            cache,
            strategies,
            workers=self.settings.SCREENER_WORKERS,
            source_size=self.settings.SCREENER_SOURCE_SIZE,
        )

        completed = self.pipeline.start(universe)
        while not completed.wait(WAIT_POLL_SECONDS):
            if self.interrupted.is_set():
                logger.warning("⚠️ Interrupted, abandoning in-flight screening")
                self.pipeline.shutdown()
                return False

        return True

    def stop(self):
        """Release executors and the store"""
        logger.info("Stopping Screener Service...")
        if self.step_executor:
            self.step_executor.shutdown(wait=False, cancel_futures=True)
        self.store.close()
        logger.info("Screener Service stopped")


def signal_handler(service):
    """Handle SIGINT/SIGTERM"""

    def handler(signum, frame):
        logger.info(f"Received signal {signum}")
        service.interrupted.set()

    return handler


def main() -> int:
    """Main entry point"""
    service = ScreenerService()

    signal.signal(signal.SIGINT, signal_handler(service))
    signal.signal(signal.SIGTERM, signal_handler(service))

    return service.start()


if __name__ == "__main__":
    sys.exit(main())
