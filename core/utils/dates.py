"""
Trading-day date helpers

All candle timestamps are midnight of the trading day in the market timezone.
"""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def start_of_day(moment: datetime, tz: ZoneInfo) -> datetime:
    """
    Truncate a moment to midnight of its calendar day in tz

    Naive datetimes are treated as UTC.

    Example:
        >>> start_of_day(datetime(2024, 1, 1, 20, 0, tzinfo=UTC), ZoneInfo("Asia/Kolkata"))
        datetime(2024, 1, 2, 0, 0, tzinfo=ZoneInfo("Asia/Kolkata"))
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    local = moment.astimezone(tz)
    return datetime.combine(local.date(), time.min, tzinfo=tz)


def day_start(day: date, tz: ZoneInfo) -> datetime:
    """Midnight of a calendar date in tz"""
    return datetime.combine(day, time.min, tzinfo=tz)


def today_start(tz: ZoneInfo, now: datetime | None = None) -> datetime:
    """Midnight of the current day in tz"""
    return start_of_day(now or datetime.now(tz), tz)


def backfill_window(
    last_stored: datetime, tz: ZoneInfo, now: datetime | None = None
) -> tuple[datetime, datetime]:
    """
    Date range still missing after the last stored candle

    Returns:
        (start, end): start is the day after last_stored, end is tomorrow
        (both midnight in tz). start >= end means nothing to fetch.
    """
    start = start_of_day(last_stored, tz) + timedelta(days=1)
    end = today_start(tz, now) + timedelta(days=1)
    return start, end
