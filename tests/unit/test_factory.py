"""
Unit tests for factory pattern

Tests that correct client implementations are created by provider name
"""

from unittest.mock import patch

import pytest

from factory.client_factory import (
    create_candle_store,
    create_market_data_client,
    create_reference_data_client,
)
from providers.groww.rest_api import GrowwRestAPI
from providers.nse.bhavcopy import NSEBhavcopyAPI
from providers.opensource.clickhouse import ClickHouseCandleStore


@pytest.mark.unit
class TestCandleStoreFactory:
    """Test candle store factory"""

    def test_create_clickhouse(self):
        assert isinstance(create_candle_store(), ClickHouseCandleStore)

    def test_provider_is_case_insensitive(self):
        assert isinstance(create_candle_store("ClickHouse"), ClickHouseCandleStore)

    def test_unsupported_provider_raises_error(self):
        with pytest.raises(ValueError, match="Unsupported candle store"):
            create_candle_store("postgres")


@pytest.mark.unit
class TestMarketDataFactory:
    """Test market-data client factory"""

    def test_create_groww(self):
        client = create_market_data_client("groww")

        assert isinstance(client, GrowwRestAPI)
        client.close()

    @patch("factory.client_factory.get_settings")
    def test_warns_without_token(self, mock_settings, caplog):
        mock_settings.return_value.GROWW_ACCESS_TOKEN = ""

        client = create_market_data_client("groww")
        client.close()

        assert "GROWW_ACCESS_TOKEN is empty" in caplog.text

    def test_unsupported_provider_raises_error(self):
        with pytest.raises(ValueError, match="Unsupported market-data provider"):
            create_market_data_client("zerodha")


@pytest.mark.unit
class TestReferenceDataFactory:
    """Test reference-data client factory"""

    def test_create_nse(self):
        client = create_reference_data_client("nse")

        assert isinstance(client, NSEBhavcopyAPI)
        client.close()

    def test_unsupported_provider_raises_error(self):
        with pytest.raises(ValueError, match="Unsupported reference-data provider"):
            create_reference_data_client("bse")
