"""
Unit tests for Ingestor

Tests incremental backfill windows, per-stock failure isolation and
producer-side rate limiting.
"""

import time
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from core.models.market_data import Stock
from services.sync_service.ingestor import Ingestor
from tests.fakes import IST, START_DAY, FakeMarketData, InMemoryCandleStore, make_series

# 2024-01-03 15:30 IST
NOW = START_DAY + timedelta(days=2, hours=15, minutes=30)


def fixed_now() -> datetime:
    return NOW


@pytest.mark.unit
class TestBackfill:
    """Test single-stock backfill"""

    def test_new_stock_fetches_from_default_start(self, store, reliance):
        api = FakeMarketData()
        ingestor = Ingestor(store, api, rps=4, tz=IST, now=fixed_now)

        inserted = ingestor.backfill(reliance)

        # Default start 2023-12-31 → fetch 2024-01-01 .. 2024-01-03
        assert inserted == 3
        symbol, start, end = api.calls[0]
        assert symbol == "RELIANCE"
        assert start == START_DAY
        assert end == START_DAY + timedelta(days=3)

    def test_fetches_only_after_last_stored_day(self, reliance):
        store = InMemoryCandleStore({"RELIANCE": make_series([1, 2])})
        api = FakeMarketData()
        ingestor = Ingestor(store, api, rps=4, tz=IST, now=fixed_now)

        inserted = ingestor.backfill(reliance)

        assert inserted == 1
        _, start, _ = api.calls[0]
        assert start == START_DAY + timedelta(days=2)
        assert len(store.candles["RELIANCE"]) == 3

    def test_up_to_date_stock_skips_api(self, reliance):
        store = InMemoryCandleStore({"RELIANCE": make_series([1, 2, 3])})
        api = FakeMarketData()
        ingestor = Ingestor(store, api, rps=4, tz=IST, now=fixed_now)

        assert ingestor.backfill(reliance) == 0
        assert api.calls == []

    def test_empty_response_skips_insert(self, reliance):
        store = MagicMock()
        store.get_last_candle_timestamp.return_value = START_DAY - timedelta(days=1)
        api = MagicMock()
        api.fetch_daily_candles.return_value = []
        ingestor = Ingestor(store, api, rps=4, tz=IST, now=fixed_now)

        assert ingestor.backfill(reliance) == 0
        store.bulk_insert_candles.assert_not_called()

    @pytest.mark.parametrize("rps,workers", [(0, 4), (4, 0)])
    def test_invalid_configuration(self, store, rps, workers):
        with pytest.raises(ValueError):
            Ingestor(store, FakeMarketData(), rps=rps, workers=workers)


@pytest.mark.unit
class TestIngest:
    """Test batch ingestion"""

    def test_failures_are_isolated(self, store):
        stocks = [Stock(symbol=s) for s in ("RELIANCE", "TCS", "INFY")]
        api = FakeMarketData(failing={"TCS"})
        ingestor = Ingestor(store, api, rps=4, workers=2, tz=IST, now=fixed_now)

        summary = ingestor.ingest(stocks)

        assert summary.succeeded == 2
        assert summary.failed == 1
        assert summary.candles == 6
        assert "TCS" not in store.candles
        assert len(api.calls) == 3

    def test_empty_batch(self, store):
        summary = Ingestor(store, FakeMarketData(), rps=4, tz=IST).ingest([])

        assert summary.succeeded == 0
        assert summary.failed == 0

    @pytest.mark.slow
    def test_rate_limit(self, store):
        """25 stocks at 10 per second need at least two full windows"""
        stocks = [Stock(symbol=f"SYM{i}") for i in range(25)]
        api = FakeMarketData()
        ingestor = Ingestor(store, api, rps=10, workers=8, tz=IST, now=fixed_now)

        started = time.monotonic()
        summary = ingestor.ingest(stocks)
        elapsed = time.monotonic() - started

        assert summary.succeeded == 25
        assert elapsed >= 2.0
