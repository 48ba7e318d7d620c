"""
Unit tests for the screener entry point

Tests the full run and the interrupt race with patched clients.
"""

import logging
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from core.interfaces.steps import BaseStep
from core.interfaces.strategies import BaseStrategy
from core.models.market_data import Stock
from services.screener_service import main as screener_main
from tests.fakes import InMemoryCandleStore, make_series

SHIPPED_CONFIG = Path(__file__).parents[3] / "config" / "providers" / "strategies.yaml"


class BlockingStep(BaseStep):
    def __init__(self, cache, release: threading.Event):
        super().__init__(cache)
        self.release = release

    @property
    def name(self) -> str:
        return "blocking"

    def screen(self, strategy_name: str, stock: Stock) -> bool:
        self.release.wait(timeout=10)
        return True


class BlockingStrategy(BaseStrategy):
    def __init__(self, cache, release: threading.Event, **kwargs):
        super().__init__(cache, **kwargs)
        self.release = release

    @property
    def default_name(self) -> str:
        return "Blocking"

    def build_steps(self) -> list[BaseStep]:
        return [BlockingStep(self.cache, self.release)]


@pytest.fixture
def settings():
    return MagicMock(
        SCREENER_WORKERS=2,
        SCREENER_STEP_WORKERS=4,
        SCREENER_SOURCE_SIZE=10,
        SCREENER_SINK_SIZE=10,
        SCREENER_SYNC_BEFORE_RUN=False,
        SCREENER_DELETE_DELISTED=True,
        STRATEGIES_CONFIG_PATH=str(SHIPPED_CONFIG),
    )


@pytest.fixture
def candle_store():
    return InMemoryCandleStore(
        {
            "RELIANCE": make_series([100.0 + i for i in range(30)]),
            "OLDCO": make_series([50.0] * 10, symbol="OLDCO"),
        }
    )


@pytest.fixture
def service(settings, candle_store):
    with (
        patch.object(screener_main, "get_settings", return_value=settings),
        patch.object(screener_main, "create_candle_store", return_value=candle_store),
        patch.object(
            screener_main,
            "resolve_universe",
            return_value=([Stock(symbol="RELIANCE"), Stock(symbol="OLDCO")], None),
        ),
    ):
        yield screener_main.ScreenerService()


@pytest.mark.unit
class TestScreenerService:
    """Test one screening run end to end"""

    def test_full_run_deletes_delisted(self, service, candle_store):
        assert service.start() == screener_main.EXIT_OK

        assert service.pipeline.state.value == "done"
        assert len(service.pipeline.results) == 6
        assert "OLDCO" not in candle_store.candles

    def test_skips_delete_when_disabled(self, service, settings, candle_store):
        settings.SCREENER_DELETE_DELISTED = False

        assert service.start() == screener_main.EXIT_OK
        assert "OLDCO" in candle_store.candles

    def test_sync_runs_before_screening(self, service, settings):
        settings.SCREENER_SYNC_BEFORE_RUN = True

        with (
            patch.object(screener_main, "create_market_data_client") as api_factory,
            patch.object(screener_main, "sync_candles") as sync,
        ):
            assert service.start() == screener_main.EXIT_OK

        sync.assert_called_once()
        api_factory.return_value.close.assert_called_once()

    def test_store_failure_is_fatal(self, service, candle_store):
        with patch.object(candle_store, "connect", side_effect=ConnectionError("down")):
            assert service.start() == screener_main.EXIT_FAILURE

    def test_interrupt_abandons_run(self, service, candle_store):
        release = threading.Event()

        def load(cache, *args, **kwargs):
            return [BlockingStrategy(cache, release)]

        timer = threading.Timer(0.3, service.interrupted.set)
        try:
            with patch.object(screener_main.StrategyLoader, "load", side_effect=load):
                timer.start()
                assert service.start() == screener_main.EXIT_INTERRUPTED

            assert not service.pipeline.completed.is_set()
            assert "OLDCO" in candle_store.candles
        finally:
            timer.cancel()
            release.set()

    def test_signal_handler_sets_interrupt(self, service):
        screener_main.signal_handler(service)(15, None)

        assert service.interrupted.is_set()

    def test_password_never_logged(self, service, settings, caplog):
        settings.CLICKHOUSE_PASSWORD = "S3CRET"
        settings.clickhouse_address = "h:9000/db"

        with caplog.at_level(logging.DEBUG):
            assert service.start() == screener_main.EXIT_OK

        assert "h:9000/db" in caplog.text
        assert not [r for r in caplog.records if "S3CRET" in r.getMessage()]
