"""
Sync orchestration shared by the sync and screener entry points
"""

import logging
from datetime import date

from config.settings import Settings
from core.interfaces.candle_store import BaseCandleStore
from core.interfaces.market_data import BaseMarketDataAPI
from core.models.market_data import Stock
from factory.client_factory import create_reference_data_client
from services.sync_service.ingestor import IngestionSummary, Ingestor
from services.sync_service.universe import (
    fetch_reference_universe,
    load_universe_file,
    resolve_backfill_set,
)

logger = logging.getLogger(__name__)


def resolve_universe(settings: Settings) -> tuple[list[Stock], date | None]:
    """
    Screening universe for this run

    Returns:
        (stocks, trading_day): trading_day is None for a fixed YAML universe
    """
    if settings.UNIVERSE_FILE:
        return load_universe_file(settings.UNIVERSE_FILE), None

    reference = create_reference_data_client()
    try:
        return fetch_reference_universe(
            reference, exchange=settings.MARKET_EXCHANGE, segment=settings.MARKET_SEGMENT
        )
    finally:
        reference.close()


def sync_candles(
    settings: Settings,
    store: BaseCandleStore,
    market_data: BaseMarketDataAPI,
    universe: list[Stock],
    trading_day: date | None,
) -> IngestionSummary:
    """
    Bring stored candles up to date for the stocks that need it

    Without a trading day every universe stock is checked; the per-stock
    backfill window skips those already current.
    """
    if trading_day is None:
        stocks = universe
    else:
        stocks = resolve_backfill_set(universe, store, trading_day)

    if not stocks:
        logger.info("✓ All stocks up to date, nothing to sync")
        return IngestionSummary()

    ingestor = Ingestor(
        store,
        market_data,
        rps=settings.GROWW_RPS,
        workers=settings.INGESTION_WORKERS,
        queue_size=settings.INGESTION_QUEUE_SIZE,
        tz=settings.market_tz,
    )
    logger.info(f"🔄 Syncing {len(stocks)} stocks at {settings.GROWW_RPS} rps")
    return ingestor.ingest(stocks)
