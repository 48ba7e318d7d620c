"""
Client factory - Auto-create clients based on configuration

Dependency injection pattern for provider-agnostic code
"""

import logging

from config.settings import get_settings
from core.interfaces.candle_store import BaseCandleStore
from core.interfaces.market_data import BaseMarketDataAPI, BaseReferenceDataAPI

logger = logging.getLogger(__name__)


def create_candle_store(provider: str = "clickhouse") -> BaseCandleStore:
    """
    Create durable candle store

    Currently always returns ClickHouseCandleStore
    Future: Could support TimescaleDB, PostgreSQL

    Returns:
        BaseCandleStore: ClickHouse store
    """
    provider = provider.lower()

    if provider == "clickhouse":
        from providers.opensource.clickhouse import ClickHouseCandleStore

        logger.info("Creating ClickHouseCandleStore")
        return ClickHouseCandleStore()

    raise ValueError(f"Unsupported candle store: {provider}. Supported: clickhouse")


def create_market_data_client(provider: str = "groww") -> BaseMarketDataAPI:
    """
    Create historical market-data client

    Args:
        provider: Market-data provider (groww)

    Returns:
        BaseMarketDataAPI: Provider-specific REST client

    Raises:
        ValueError: If provider is not supported

    Examples:
        >>> api = create_market_data_client("groww")
        >>> candles = api.fetch_daily_candles(stock, start, end)
    """
    provider = provider.lower()

    if provider == "groww":
        from providers.groww.rest_api import GrowwRestAPI

        settings = get_settings()
        if not settings.GROWW_ACCESS_TOKEN:
            logger.warning("⚠️ GROWW_ACCESS_TOKEN is empty; requests will be rejected")

        logger.info("✓ Creating GrowwRestAPI")
        return GrowwRestAPI()

    raise ValueError(f"Unsupported market-data provider: {provider}. Supported: groww")


def create_reference_data_client(provider: str = "nse") -> BaseReferenceDataAPI:
    """
    Create reference-listing client

    Args:
        provider: Listing provider (nse)

    Returns:
        BaseReferenceDataAPI: Provider-specific listing client
    """
    provider = provider.lower()

    if provider == "nse":
        from providers.nse.bhavcopy import NSEBhavcopyAPI

        logger.info("✓ Creating NSEBhavcopyAPI")
        return NSEBhavcopyAPI()

    raise ValueError(f"Unsupported reference-data provider: {provider}. Supported: nse")
