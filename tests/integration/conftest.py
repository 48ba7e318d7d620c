"""
Pytest configuration for integration tests

Integration tests need a running ClickHouse (localhost:9000 by default) and
are skipped when it cannot be reached.
"""

import pytest

from core.exceptions import CandleStoreError
from providers.opensource.clickhouse import ClickHouseCandleStore


@pytest.fixture
def clickhouse_store():
    store = ClickHouseCandleStore()
    try:
        store.connect()
    except CandleStoreError as e:
        pytest.skip(f"ClickHouse not reachable: {e}")

    store.ensure_schema()
    yield store
    store.close()
