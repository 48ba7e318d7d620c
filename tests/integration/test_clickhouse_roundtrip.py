"""
Integration test for the ClickHouse candle store

Round-trips candles through stock_prices on a live server.
"""

import uuid

import pytest

from providers.opensource.clickhouse import TABLE
from tests.fakes import make_series


@pytest.fixture
def symbol(clickhouse_store):
    symbol = f"ITEST{uuid.uuid4().hex[:8].upper()}"
    yield symbol
    clickhouse_store.client.execute(
        f"ALTER TABLE {TABLE} DELETE WHERE symbol = %(symbol)s",
        {"symbol": symbol},
        settings={"mutations_sync": 1},
    )


@pytest.mark.integration
class TestClickHouseCandleStore:
    """Test candle persistence against a live ClickHouse"""

    def test_insert_and_fetch_ascending(self, clickhouse_store, symbol):
        candles = make_series([101.0, 102.5, 103.0], symbol=symbol)

        assert clickhouse_store.bulk_insert_candles(symbol, candles) == 3

        stored = clickhouse_store.fetch_all_candles(symbol)
        assert [c.close for c in stored] == [101.0, 102.5, 103.0]
        assert [c.timestamp for c in stored] == [c.timestamp for c in candles]

    def test_reinsert_replaces_day(self, clickhouse_store, symbol):
        clickhouse_store.bulk_insert_candles(symbol, make_series([100.0], symbol=symbol))
        clickhouse_store.bulk_insert_candles(symbol, make_series([105.0], symbol=symbol))

        stored = clickhouse_store.fetch_all_candles(symbol)
        assert [c.close for c in stored] == [105.0]

    def test_last_candle_timestamp(self, clickhouse_store, symbol):
        candles = make_series([100.0, 101.0], symbol=symbol)
        clickhouse_store.bulk_insert_candles(symbol, candles)

        assert clickhouse_store.get_last_candle_timestamp(symbol) == candles[-1].timestamp
