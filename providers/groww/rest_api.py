"""
Groww REST API client for fetching daily OHLCV candles.

Uses requests with a shared session (bearer token + API version headers).
"""

import logging
from datetime import datetime

import requests
from pydantic import ValidationError

from config.settings import get_settings
from core.exceptions import MarketDataError
from core.interfaces.market_data import BaseMarketDataAPI
from core.models.market_data import Candle, CandlesResponse, Stock
from core.utils.dates import DATETIME_FORMAT, start_of_day

logger = logging.getLogger(__name__)

HISTORICAL_CANDLES_ENDPOINT = "/historical/candle/range"
DAILY_INTERVAL_MINUTES = 1440


class GrowwRestAPI(BaseMarketDataAPI):
    """
    Groww REST API client for historical daily candles.

    Candle rows arrive as [epoch_seconds, open, high, low, close, volume];
    timestamps are normalized to midnight in the market timezone.
    """

    def __init__(self, session: requests.Session | None = None):
        self.settings = get_settings()
        self.base_url = f"{self.settings.GROWW_BASE_URL}/{self.settings.GROWW_API_VERSION}"
        self.timeout = self.settings.GROWW_TIMEOUT_SECONDS

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {self.settings.GROWW_ACCESS_TOKEN}",
                "X-API-VERSION": self.settings.GROWW_X_API_VERSION,
                "Accept": "application/json",
            }
        )
        logger.info("GrowwRestAPI initialized")

    def fetch_daily_candles(self, stock: Stock, start: datetime, end: datetime) -> list[Candle]:
        """
        Fetch daily candles for one stock.

        Args:
            stock: Stock to fetch
            start: First day (inclusive)
            end: Day after the last day

        Returns:
            List of Candle objects, ascending
        """
        if start >= end:
            return []

        params = {
            "exchange": stock.exchange,
            "segment": stock.segment,
            "trading_symbol": stock.symbol,
            "start_time": start.strftime(DATETIME_FORMAT),
            "end_time": end.strftime(DATETIME_FORMAT),
            "interval_in_minutes": DAILY_INTERVAL_MINUTES,
        }

        try:
            resp = self.session.get(
                f"{self.base_url}{HISTORICAL_CANDLES_ENDPOINT}",
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise MarketDataError(f"request failed for {stock.symbol}: {e}") from e

        if not resp.ok:
            raise MarketDataError(
                f"HTTP {resp.status_code} for {stock.symbol}: {resp.text[:200]}"
            )

        try:
            body = CandlesResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise MarketDataError(f"malformed response for {stock.symbol}: {e}") from e

        if body.status != "SUCCESS":
            raise MarketDataError(f"status {body.status} for {stock.symbol}")

        rows = body.payload.candles if body.payload else []
        candles = [self._to_candle(stock.symbol, row) for row in rows]
        logger.debug(f"Fetched {len(candles)} candles for {stock.symbol}")
        return candles

    def _to_candle(self, symbol: str, row: list[float]) -> Candle:
        if len(row) < 6:
            raise MarketDataError(f"malformed candle row for {symbol}: {row}")

        timestamp, open_, high, low, close, volume = row[:6]
        try:
            return Candle(
                symbol=symbol,
                timestamp=start_of_day(
                    datetime.fromtimestamp(int(timestamp), tz=self.settings.market_tz),
                    self.settings.market_tz,
                ),
                open=open_,
                high=high,
                low=low,
                close=close,
                volume=int(volume),
            )
        except (TypeError, ValueError) as e:
            raise MarketDataError(f"malformed candle row for {symbol}: {row}") from e

    def close(self) -> None:
        self.session.close()
        logger.info("GrowwRestAPI closed")
