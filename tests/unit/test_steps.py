"""
Unit tests for screening steps

Steps read from a fixed cache and must fail closed on missing data,
cache misses and raising tests.
"""

from unittest.mock import MagicMock

import pytest

from core.models.market_data import Stock
from domain.steps import (
    BollingerBandsStep,
    BullishCandleStep,
    EMACrossoverStep,
    EMAStep,
    LiquidityLevelsStep,
    RSIStep,
    VolumeStep,
)
from tests.fakes import DictCache, make_candle, make_series

STOCK = Stock(symbol="RELIANCE")
UNKNOWN = Stock(symbol="UNKNOWN")


@pytest.fixture
def cache():
    """Cache holding 60 rising closes for RELIANCE"""
    return DictCache({"RELIANCE": make_series([100 + i for i in range(60)])})


@pytest.mark.unit
class TestRSIStep:
    """Test RSI screener"""

    def test_passes_full_series(self, cache):
        test = MagicMock(return_value=True)
        step = RSIStep(cache, test=test)

        assert step.screen("Test", STOCK) is True
        (rsi,), _ = test.call_args
        assert len(rsi) == 60 - 14
        assert rsi[-1] == 100.0

    def test_cache_miss_fails_closed(self, cache):
        test = MagicMock(return_value=True)
        step = RSIStep(cache, test=test)

        assert step.screen("Test", UNKNOWN) is False
        test.assert_not_called()

    def test_insufficient_data(self):
        test = MagicMock(return_value=True)
        step = RSIStep(DictCache({"RELIANCE": make_series([1.0] * 10)}), test=test)

        assert step.screen("Test", STOCK) is False
        test.assert_not_called()

    def test_raising_test_fails_closed(self, cache):
        step = RSIStep(cache, test=lambda rsi: rsi[1000] > 0)

        assert step.screen("Test", STOCK) is False

    def test_name(self, cache):
        assert RSIStep(cache, test=bool).name == "RSI screener"


@pytest.mark.unit
class TestEMASteps:
    """Test EMA and EMA crossover screeners"""

    def test_ema_step_name_includes_period(self, cache):
        assert EMAStep(cache, period=50, test=lambda c, e: True).name == "EMA 50 screener"

    def test_ema_step_passes_candles_and_ema(self, cache):
        step = EMAStep(cache, period=10, test=lambda candles, ema: candles[-1].close > ema[-1])

        assert step.screen("Test", STOCK) is True

    def test_ema_step_insufficient_data(self, cache):
        step = EMAStep(cache, period=200, test=lambda c, e: True)

        assert step.screen("Test", STOCK) is False

    def test_crossover_fails_closed_on_any_short_period(self, cache):
        test = MagicMock(return_value=True)
        step = EMACrossoverStep(cache, periods=[5, 13, 200], test=test)

        assert step.screen("Test", STOCK) is False
        test.assert_not_called()

    def test_crossover_passes_every_series(self, cache):
        test = MagicMock(return_value=True)
        step = EMACrossoverStep(cache, periods=[5, 13, 26], test=test)

        assert step.screen("Test", STOCK) is True
        (emas,), _ = test.call_args
        assert [len(e) for e in emas] == [56, 48, 35]


@pytest.mark.unit
class TestVolumeStep:
    """Test volume screener"""

    def test_compares_current_to_average(self):
        volumes = [1000] * 19 + [3000]
        cache = DictCache({"RELIANCE": make_series([100.0] * 20, volumes=volumes)})
        test = MagicMock(return_value=True)

        assert VolumeStep(cache, test=test).screen("Test", STOCK) is True
        test.assert_called_once_with(3000.0, pytest.approx(1100.0))

    def test_insufficient_data(self):
        cache = DictCache({"RELIANCE": make_series([100.0] * 19)})

        assert VolumeStep(cache, test=lambda c, a: True).screen("Test", STOCK) is False


@pytest.mark.unit
class TestBollingerBandsStep:
    """Test Bollinger Bands screener"""

    def test_requires_min_points(self):
        cache = DictCache({"RELIANCE": make_series([100.0] * 21)})
        test = MagicMock(return_value=True)

        assert BollingerBandsStep(cache, test=test).screen("Test", STOCK) is False
        test.assert_not_called()

    def test_passes_bands(self):
        cache = DictCache({"RELIANCE": make_series([100.0] * 22)})
        test = MagicMock(return_value=True)

        assert BollingerBandsStep(cache, test=test).screen("Test", STOCK) is True
        (candles, sma, lower, upper), _ = test.call_args
        assert len(candles) == 22
        assert len(sma) == len(lower) == len(upper) == 3


@pytest.mark.unit
class TestLiquidityLevelsStep:
    """Test liquidity levels screener"""

    @pytest.mark.parametrize(
        "window,tolerance,strength",
        [(0, 0.01, 3), (5, 0.0, 3), (5, 0.01, 0), (-1, 0.01, 3)],
    )
    def test_invalid_parameters_fail_closed(self, cache, window, tolerance, strength):
        test = MagicMock(return_value=True)
        step = LiquidityLevelsStep(
            cache, window=window, tolerance=tolerance, strength=strength, test=test
        )

        assert step.screen("Test", STOCK) is False
        test.assert_not_called()

    def test_passes_levels(self, cache):
        test = MagicMock(return_value=False)
        step = LiquidityLevelsStep(cache, window=5, tolerance=0.01, strength=3, test=test)

        assert step.screen("Test", STOCK) is False
        test.assert_called_once()


@pytest.mark.unit
class TestBullishCandleStep:
    """Test bullish candle screener"""

    def test_bullish_tail(self):
        cache = DictCache({"RELIANCE": [make_candle(110, open=100, high=111, low=99)]})

        assert BullishCandleStep(cache).screen("Test", STOCK) is True

    def test_empty_series(self):
        assert BullishCandleStep(DictCache({"RELIANCE": []})).screen("Test", STOCK) is False
