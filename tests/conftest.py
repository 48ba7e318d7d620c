"""
Pytest configuration for test suite

Markers:
- unit: Fast unit tests (no external dependencies)
- integration: Integration tests (requires Docker services)
- slow: Slow-running tests (timing-based or repeated runs)
"""

import pytest

from core.models.market_data import Stock
from tests.fakes import InMemoryCandleStore


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Fast unit tests (no dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (requires Docker)"
    )
    config.addinivalue_line("markers", "slow: Slow tests (timing or repeated runs)")


@pytest.fixture
def store():
    """Empty in-memory candle store"""
    return InMemoryCandleStore()


@pytest.fixture
def reliance():
    """Single test stock"""
    return Stock(symbol="RELIANCE", name="Reliance Industries Limited")
