"""
Unit tests for CandleCache

Tests populate / get / purge semantics with an in-memory store.
"""

import threading
from unittest.mock import MagicMock

import pytest

from core.exceptions import CacheMissError, CandleStoreError
from core.models.market_data import Stock
from services.screener_service.cache import CandleCache
from tests.fakes import InMemoryCandleStore, make_series


@pytest.fixture
def cache():
    store = InMemoryCandleStore(
        {
            "RELIANCE": make_series([1, 2, 3]),
            "TCS": make_series([4, 5], symbol="TCS"),
        }
    )
    return CandleCache(store)


@pytest.mark.unit
class TestCandleCache:
    """Test per-run candle cache"""

    def test_get_after_populate(self, cache, reliance):
        cache.populate(reliance)

        assert [c.close for c in cache.get(reliance)] == [1, 2, 3]
        assert reliance in cache
        assert len(cache) == 1

    def test_get_before_populate_is_a_miss(self, cache, reliance):
        with pytest.raises(CacheMissError, match="unexpected cache miss: RELIANCE"):
            cache.get(reliance)

    def test_purge_removes_entry(self, cache, reliance):
        cache.populate(reliance)
        cache.purge(reliance)

        assert reliance not in cache
        with pytest.raises(CacheMissError):
            cache.get(reliance)

    def test_purge_is_idempotent(self, cache, reliance):
        cache.purge(reliance)
        cache.populate(reliance)
        cache.purge(reliance)
        cache.purge(reliance)

        assert len(cache) == 0

    def test_bad_price_candles_never_reach_cache(self, reliance):
        candles = make_series([1, 2, 3])
        candles[1] = candles[1].model_copy(update={"low": 0.0})
        cache = CandleCache(InMemoryCandleStore({"RELIANCE": candles}))

        cache.populate(reliance)

        assert [c.close for c in cache.get(reliance)] == [1, 3]

    def test_unknown_symbol_caches_empty_series(self, cache):
        stock = Stock(symbol="NEWLIST")
        cache.populate(stock)

        assert cache.get(stock) == []

    def test_store_failure_is_wrapped(self, reliance):
        store = MagicMock()
        store.fetch_all_candles.side_effect = ConnectionError("clickhouse down")
        cache = CandleCache(store)

        with pytest.raises(CandleStoreError, match="RELIANCE"):
            cache.populate(reliance)
        assert len(cache) == 0

    def test_store_error_propagates_unchanged(self, reliance):
        store = MagicMock()
        error = CandleStoreError("timeout")
        store.fetch_all_candles.side_effect = error
        cache = CandleCache(store)

        with pytest.raises(CandleStoreError) as exc_info:
            cache.populate(reliance)
        assert exc_info.value is error

    def test_store_read_happens_outside_lock(self, reliance):
        """A slow store read does not block readers of other symbols"""
        release = threading.Event()
        fast = Stock(symbol="TCS")

        class SlowStore(InMemoryCandleStore):
            def fetch_all_candles(self, symbol):
                if symbol == "RELIANCE":
                    release.wait(timeout=5)
                return super().fetch_all_candles(symbol)

        cache = CandleCache(SlowStore({"TCS": make_series([4, 5], symbol="TCS")}))
        cache.populate(fast)

        loader = threading.Thread(target=cache.populate, args=(reliance,))
        loader.start()
        try:
            assert len(cache.get(fast)) == 2
        finally:
            release.set()
            loader.join(timeout=5)
        assert reliance in cache

    def test_concurrent_readers(self, cache, reliance):
        cache.populate(reliance)
        errors = []

        def read():
            try:
                for _ in range(200):
                    assert len(cache.get(reliance)) == 3
            except Exception as e:
                errors.append(e)

        readers = [threading.Thread(target=read) for _ in range(8)]
        for thread in readers:
            thread.start()
        for thread in readers:
            thread.join()

        assert errors == []
