"""
Sync Service - Bring stored daily candles up to date

One-shot job:
- Resolves the universe (NSE listing or fixed YAML list)
- Backfills new and stale stocks from the market-data API (rate limited)
- Appends to ClickHouse (ReplacingMergeTree dedups on (symbol, timestamp))

Run before screening, or let the screener do it (screener.sync_before_run).
"""

import logging
import os
import signal
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings
from factory.client_factory import create_candle_store, create_market_data_client
from services.sync_service.sync import resolve_universe, sync_candles

# Configure logging
os.makedirs("data/logs", exist_ok=True)

_fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_level = get_settings().log_level

_console = logging.StreamHandler(sys.stdout)
_console.setLevel(_level)
_console.setFormatter(logging.Formatter(_fmt))

_file = RotatingFileHandler(
    "data/logs/sync_service_errors.log",
    maxBytes=5 * 1024 * 1024,  # 5MB
    backupCount=3,
)
_file.setLevel(logging.ERROR)
_file.setFormatter(logging.Formatter(_fmt))

logging.basicConfig(level=_level, handlers=[_console, _file])
logger = logging.getLogger(__name__)


class SyncService:
    """Resolve the universe and backfill missing candles once"""

    def __init__(self):
        self.settings = get_settings()
        self.store = create_candle_store()
        self.market_data = create_market_data_client()

    def start(self) -> int:
        """Run one sync; returns the process exit code"""
        logger.info("=" * 60)
        logger.info("Sync Service started")
        logger.info("=" * 60)
        logger.info(f"  ClickHouse: {self.settings.clickhouse_address}")
        logger.info(f"  Rate limit: {self.settings.GROWW_RPS} rps")
        logger.info(f"  Workers: {self.settings.INGESTION_WORKERS}")
        logger.info("=" * 60)

        try:
            self.store.connect()
            self.store.ensure_schema()
            logger.info("✓ Connected to ClickHouse")

            universe, trading_day = resolve_universe(self.settings)
            summary = sync_candles(
                self.settings, self.store, self.market_data, universe, trading_day
            )
            return 0 if summary.failed == 0 else 2

        except Exception as e:
            logger.error(f"Error in sync service: {e}", exc_info=True)
            return 1
        finally:
            self.stop()

    def stop(self):
        """Release clients"""
        logger.info("Stopping Sync Service...")
        self.market_data.close()
        self.store.close()
        logger.info("Sync Service stopped")


def signal_handler(signum, frame):
    """Handle SIGINT/SIGTERM"""
    logger.info(f"Received signal {signum}, aborting sync")
    sys.exit(130)


def main() -> int:
    """Main entry point"""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    return SyncService().start()


if __name__ == "__main__":
    sys.exit(main())
