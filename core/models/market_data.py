"""
Market data models

Pydantic models for screener data structures:
- Candle: daily OHLCV candlestick
- Stock: listed instrument (identity = symbol)
- StrategyResult: stocks matched by one strategy in one run
- CandlesResponse: market-data provider payload
- ReferenceRecord: one row of the exchange reference listing
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Candle(BaseModel):
    """
    Daily OHLCV candlestick

    Timestamp is midnight of the trading day in the market timezone.
    """

    symbol: str = Field(description="Trading symbol (RELIANCE, TCS)")
    timestamp: datetime = Field(description="Start of trading day (market timezone)")
    open: float = Field(description="Opening price")
    high: float = Field(description="Highest price of the day")
    low: float = Field(description="Lowest price of the day")
    close: float = Field(description="Closing price")
    volume: int = Field(ge=0, description="Shares traded")

    def to_row(self) -> tuple:
        """Convert to row tuple for bulk insertion"""
        return (
            self.symbol,
            self.timestamp.date(),
            self.open,
            self.high,
            self.low,
            self.close,
            self.volume,
        )


class Stock(BaseModel):
    """
    Listed instrument

    Identity is the symbol only; exchange/segment/name are descriptive.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(description="Trading symbol (unique key)")
    exchange: str = Field(default="NSE", description="Exchange code")
    segment: str = Field(default="CASH", description="Market segment")
    name: str = Field(default="", description="Display name")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stock):
            return NotImplemented
        return self.symbol == other.symbol

    def __hash__(self) -> int:
        return hash(self.symbol)


class StrategyResult(BaseModel):
    """Stocks that satisfied one strategy during a run"""

    strategy: str = Field(description="Strategy name")
    stocks: list[Stock] = Field(default_factory=list)

    @property
    def symbols(self) -> list[str]:
        """Matched symbols, sorted for stable reporting"""
        return sorted(s.symbol for s in self.stocks)

    def summary(self) -> str:
        """One report line for this strategy"""
        if not self.stocks:
            return f"{self.strategy}: no symbols matched"
        return (
            f"{self.strategy}: {len(self.stocks)} symbols matched "
            f"[{', '.join(self.symbols)}]"
        )


class CandlesPayload(BaseModel):
    """Payload block of a historical candle response"""

    candles: list[list[float]] = Field(
        default_factory=list,
        description="[[epoch_seconds, open, high, low, close, volume], ...]",
    )
    start_time: str | None = None
    end_time: str | None = None
    interval_in_minutes: int | None = None


class CandlesResponse(BaseModel):
    """Historical candle response from the market-data provider"""

    status: str
    payload: CandlesPayload | None = None


class ReferenceRecord(BaseModel):
    """One instrument row of the exchange reference listing"""

    symbol: str
    series: str
    name: str = ""
    segment: str = ""
    instrument_type: str = ""
    isin: str = ""

    def to_stock(self, exchange: str = "NSE", segment: str = "CASH") -> Stock:
        """Project onto the screener's Stock identity"""
        return Stock(symbol=self.symbol, exchange=exchange, segment=segment, name=self.name)


class TechnicalDataPoint(BaseModel):
    """One row of the technical data query (newest first)"""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int
    rsi: float
    ema5: float
    ema13: float
    ema26: float
    ema50: float
    volume_ma: float
