"""
Universe resolution

- Screening universe: NSE listing (default) or a fixed YAML list
- Backfill set: listed stocks missing from the store, plus stored stocks
  whose newest candle is not on the latest trading day
"""

import logging
from datetime import date

from pydantic import BaseModel

from core.interfaces.candle_store import BaseCandleStore
from core.interfaces.market_data import BaseReferenceDataAPI
from core.models.market_data import Stock
from core.utils.config import load_yaml

logger = logging.getLogger(__name__)


class StocksFile(BaseModel):
    """Schema of a fixed universe YAML file"""

    stocks: list[Stock]


def load_universe_file(path: str) -> list[Stock]:
    """
    Read a fixed universe

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If entries are malformed
    """
    stocks = StocksFile(**load_yaml(path)).stocks
    logger.info(f"✓ Loaded {len(stocks)} stocks from {path}")
    return dedupe(stocks)


def fetch_reference_universe(
    reference: BaseReferenceDataAPI, exchange: str = "NSE", segment: str = "CASH"
) -> tuple[list[Stock], date]:
    """
    Latest listed equities and the trading day they were published for

    Raises:
        ReferenceDataError: If no listing could be found
    """
    records, trading_day = reference.fetch_latest_listing()
    stocks = dedupe([r.to_stock(exchange=exchange, segment=segment) for r in records])
    logger.info(f"✓ Universe: {len(stocks)} stocks as of {trading_day.isoformat()}")
    return stocks, trading_day


def dedupe(stocks: list[Stock]) -> list[Stock]:
    """Drop repeated symbols, keeping the first occurrence and order"""
    seen: set[str] = set()
    unique = []
    for stock in stocks:
        if stock.symbol not in seen:
            seen.add(stock.symbol)
            unique.append(stock)
    return unique


def resolve_backfill_set(
    universe: list[Stock], store: BaseCandleStore, trading_day: date
) -> list[Stock]:
    """
    Stocks that need fresh candles

    Union of universe stocks absent from the store and stored stocks that
    are stale as of trading_day, deduplicated by symbol.
    """
    stored = {s.symbol for s in store.fetch_all_symbols()}
    missing = [s for s in universe if s.symbol not in stored]
    stale = store.fetch_symbols_stale_as_of(trading_day)

    # Prefer the listing's descriptive fields over the store's defaults
    listed = {s.symbol: s for s in universe}
    stale = [listed.get(s.symbol, s) for s in stale]

    backfill = dedupe(missing + stale)
    logger.info(
        f"Backfill set: {len(backfill)} stocks ({len(missing)} new, {len(stale)} stale)"
    )
    return backfill
