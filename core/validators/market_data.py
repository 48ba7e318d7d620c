"""
Data quality validator for daily candle series

Validates:
- One symbol per series
- Strictly increasing, unique timestamps
- Price sanity (high >= low, prices > 0)
"""

import logging

from core.exceptions import InvalidCandleSeriesError
from core.models.market_data import Candle

logger = logging.getLogger(__name__)


class CandleSeriesValidator:
    """
    Candle series validation

    Indicator math assumes an ascending, duplicate-free series. Series read
    from the store or fetched from the provider pass through here before they
    reach the cache.
    """

    def validate_candle(self, candle: Candle) -> tuple[bool, str | None]:
        """
        Validate a single candle

        Returns:
            (is_valid, error_message)
        """
        if min(candle.open, candle.high, candle.low, candle.close) <= 0:
            return False, f"Non-positive price in {candle.symbol} @ {candle.timestamp}"

        if candle.high < candle.low:
            return False, (
                f"High below low in {candle.symbol} @ {candle.timestamp}: "
                f"{candle.high} < {candle.low}"
            )

        return True, None

    def validate_series(self, candles: list[Candle]) -> tuple[bool, str | None]:
        """
        Validate ordering invariants of a series

        Args:
            candles: Candles for one symbol, expected ascending by timestamp

        Returns:
            (is_valid, error_message)

        Example:
            >>> validator = CandleSeriesValidator()
            >>> ok, error = validator.validate_series(candles)
            >>> if not ok:
            ...     logger.warning(error)
        """
        if not candles:
            return True, None

        symbol = candles[0].symbol
        for i, candle in enumerate(candles):
            if candle.symbol != symbol:
                return False, f"Mixed symbols in series: {symbol} and {candle.symbol}"

            if i > 0 and candle.timestamp <= candles[i - 1].timestamp:
                return False, (
                    f"Timestamps not strictly increasing for {symbol} at index {i}: "
                    f"{candles[i - 1].timestamp} >= {candle.timestamp}"
                )

        return True, None

    def normalize(self, candles: list[Candle]) -> list[Candle]:
        """
        Drop bad-price candles, sort ascending and drop duplicate days (last one wins)

        Raises:
            InvalidCandleSeriesError: If the series mixes symbols
        """
        by_day: dict = {}
        for candle in candles:
            ok, error = self.validate_candle(candle)
            if not ok:
                logger.warning(f"⚠️ Dropped candle: {error}")
                continue
            by_day[candle.timestamp] = candle

        normalized = [by_day[ts] for ts in sorted(by_day)]
        if len(normalized) != len(candles):
            logger.warning(
                f"⚠️ Kept {len(normalized)} of {len(candles)} candles for {candles[0].symbol}"
            )

        ok, error = self.validate_series(normalized)
        if not ok:
            raise InvalidCandleSeriesError(error)
        return normalized
