"""
ClickHouse implementation of the durable candle store

Provides columnar storage for daily candles
"""

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Any

from clickhouse_driver import Client

from config.settings import get_settings
from core.exceptions import CandleStoreError
from core.interfaces.candle_store import BaseCandleStore
from core.models.market_data import Candle, Stock
from core.utils.dates import day_start, today_start

logger = logging.getLogger(__name__)

TABLE = "stock_prices"

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {TABLE}
    (
        symbol LowCardinality(String),
        timestamp Date,
        open Float64,
        high Float64,
        low Float64,
        close Float64,
        volume UInt64
    )
    ENGINE = ReplacingMergeTree
    ORDER BY (symbol, timestamp)
"""


class ClickHouseCandleStore(BaseCandleStore):
    """
    ClickHouse implementation

    Features:
    - ReplacingMergeTree keyed by (symbol, day): re-inserting a day replaces it
    - One native client per thread (clickhouse_driver.Client is not thread-safe)
    """

    def __init__(self):
        self.settings = get_settings()
        self._local = threading.local()
        self._clients: list[Client] = []
        self._clients_lock = threading.Lock()

    def _new_client(self) -> Client:
        return Client(
            host=self.settings.CLICKHOUSE_HOST,
            port=self.settings.CLICKHOUSE_PORT,
            database=self.settings.CLICKHOUSE_DB,
            user=self.settings.CLICKHOUSE_USER,
            password=self.settings.CLICKHOUSE_PASSWORD,
        )

    @property
    def client(self) -> Client:
        """Client bound to the calling thread"""
        client = getattr(self._local, "client", None)
        if client is None:
            client = self._new_client()
            self._local.client = client
            with self._clients_lock:
                self._clients.append(client)
        return client

    def connect(self) -> None:
        """Establish connection to ClickHouse"""
        try:
            # Test connection
            self.client.execute("SELECT 1")
            logger.info(
                f"✓ Connected to ClickHouse: "
                f"{self.settings.CLICKHOUSE_HOST}:{self.settings.CLICKHOUSE_PORT}"
            )
        except Exception as e:
            logger.error(f"✗ Failed to connect to ClickHouse: {e}")
            raise CandleStoreError(f"ClickHouse unreachable: {e}") from e

    def ensure_schema(self) -> None:
        """Create stock_prices if missing"""
        try:
            self.client.execute(CREATE_TABLE_SQL)
            logger.info(f"✓ Table {TABLE} ready")
        except Exception as e:
            logger.error(f"✗ Failed to create {TABLE}: {e}")
            raise CandleStoreError(str(e)) from e

    def query(self, sql: str, params: dict | None = None) -> list[dict[str, Any]]:
        """
        Execute raw SQL query

        Args:
            sql: SQL query string
            params: Query parameters

        Returns:
            List of result rows as dictionaries
        """
        try:
            # Only pass params if provided to avoid string formatting issues
            if params:
                result = self.client.execute(sql, params, with_column_types=True)
            else:
                result = self.client.execute(sql, with_column_types=True)

            # Convert to list of dicts
            if result and len(result) == 2:
                columns = [col[0] for col in result[1]]
                return [dict(zip(columns, row)) for row in result[0]]

            return []

        except Exception as e:
            logger.error(f"✗ ClickHouse query error: {e}")
            raise CandleStoreError(str(e)) from e

    def get_last_candle_timestamp(self, symbol: str) -> datetime:
        tz = self.settings.market_tz
        rows = self.query(
            f"SELECT timestamp FROM {TABLE} WHERE symbol = %(symbol)s "
            f"ORDER BY timestamp DESC LIMIT 1",
            {"symbol": symbol},
        )
        if not rows:
            return today_start(tz) - timedelta(days=self.settings.LOOKBACK_DAYS)
        return day_start(rows[0]["timestamp"], tz)

    def bulk_insert_candles(self, symbol: str, candles: list[Candle]) -> int:
        """
        Batch insert candles into stock_prices

        Returns:
            Number of rows inserted
        """
        if not candles:
            return 0

        try:
            rows = [c.to_row() for c in candles]
            query = f"""
                INSERT INTO {TABLE}
                (symbol, timestamp, open, high, low, close, volume)
                VALUES
            """
            self.client.execute(query, rows)
            logger.debug(f"Inserted {len(rows)} candles for {symbol}")
            return len(rows)

        except Exception as e:
            logger.error(f"✗ ClickHouse insert error for {symbol}: {e}")
            raise CandleStoreError(str(e)) from e

    def fetch_all_candles(self, symbol: str) -> list[Candle]:
        tz = self.settings.market_tz
        rows = self.query(
            f"""
            SELECT symbol, timestamp, open, high, low, close, volume
            FROM {TABLE} FINAL
            WHERE symbol = %(symbol)s
            ORDER BY timestamp
            """,
            {"symbol": symbol},
        )
        return [
            Candle(
                symbol=row["symbol"],
                timestamp=day_start(row["timestamp"], tz),
                open=row["open"],
                high=row["high"],
                low=row["low"],
                close=row["close"],
                volume=row["volume"],
            )
            for row in rows
        ]

    def _stocks(self, symbols: list[str]) -> list[Stock]:
        return [
            Stock(
                symbol=symbol,
                exchange=self.settings.MARKET_EXCHANGE,
                segment=self.settings.MARKET_SEGMENT,
                name=symbol,
            )
            for symbol in symbols
        ]

    def fetch_all_symbols(self) -> list[Stock]:
        rows = self.query(f"SELECT DISTINCT symbol FROM {TABLE} ORDER BY symbol")
        return self._stocks([row["symbol"] for row in rows])

    def fetch_symbols_stale_as_of(self, trading_day: date) -> list[Stock]:
        rows = self.query(
            f"""
            SELECT symbol
            FROM {TABLE}
            GROUP BY symbol
            HAVING max(timestamp) != %(trading_day)s
            ORDER BY symbol
            """,
            {"trading_day": trading_day},
        )
        return self._stocks([row["symbol"] for row in rows])

    def delete_delisted_symbols(self) -> list[str]:
        rows = self.query(
            f"""
            SELECT symbol
            FROM {TABLE}
            GROUP BY symbol
            HAVING max(timestamp) != (SELECT max(timestamp) FROM {TABLE})
            """
        )
        symbols = [row["symbol"] for row in rows]
        if not symbols:
            logger.info("✓ No delisted stocks to delete")
            return []

        try:
            self.client.execute(
                f"ALTER TABLE {TABLE} DELETE WHERE symbol IN %(symbols)s",
                {"symbols": tuple(symbols)},
            )
        except Exception as e:
            logger.error(f"✗ Failed to delete delisted stocks: {e}")
            raise CandleStoreError(str(e)) from e

        logger.info(f"✓ Deleted {len(symbols)} delisted stocks: {symbols}")
        return symbols

    def close(self) -> None:
        """Close every per-thread connection"""
        with self._clients_lock:
            clients, self._clients = self._clients, []
        for client in clients:
            client.disconnect()
        self._local = threading.local()
        logger.info("✓ ClickHouse connection closed")
