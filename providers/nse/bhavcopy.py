"""
NSE bhavcopy client for the listed-equity reference universe.

Downloads the daily PR{DDMMYY}.zip archive, reads MCAP{DDMMYYYY}.csv from it
with pandas and keeps plain cash-market equities.
"""

import io
import logging
import zipfile
from datetime import date, datetime, timedelta
from pathlib import PurePosixPath

import pandas as pd
import requests

from config.settings import get_settings
from core.exceptions import ReferenceDataError
from core.interfaces.market_data import BaseReferenceDataAPI
from core.models.market_data import ReferenceRecord

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/117.0.0.0 Safari/537.36"
)

# Header spellings seen across archive formats
COLUMN_ALIASES = {
    "symbol": ["Symbol", "TckrSymb"],
    "series": ["Series", "SctySrs"],
    "name": ["Security Name", "FinInstrmNm"],
    "segment": ["Segment", "Sgmt"],
    "instrument_type": ["Instrument Type", "InstrumentType", "FinInstrmTp"],
    "isin": ["ISIN"],
    "category": ["Category"],
}


def archive_names(day: date) -> tuple[str, str]:
    """
    Archive and member file names for a trading day

    Example:
        >>> archive_names(date(2024, 3, 5))
        ('PR050324.zip', 'MCAP05032024.csv')
    """
    return (
        f"PR{day:%d%m%y}.zip",
        f"MCAP{day:%d%m%Y}.csv",
    )


def _normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    frame = frame.rename(columns=lambda c: str(c).strip())
    renames = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in frame.columns:
                renames[alias] = field
                break
    frame = frame.rename(columns=renames)
    for column in frame.columns:
        frame[column] = frame[column].fillna("").astype(str).str.strip()
    return frame


def filter_equities(frame: pd.DataFrame) -> list[ReferenceRecord]:
    """
    Keep plain cash-market equities

    Archives carrying segment/instrument/ISIN columns keep Segment CM,
    instrument STK, series EQ and Indian ISINs (INE...). Older archives
    without them keep series EQ with category Listed.
    """
    frame = _normalize_columns(frame)
    if "symbol" not in frame.columns or "series" not in frame.columns:
        raise ReferenceDataError(f"unexpected archive columns: {list(frame.columns)}")

    if {"segment", "instrument_type", "isin"} <= set(frame.columns):
        mask = (
            (frame["segment"] == "CM")
            & (frame["instrument_type"] == "STK")
            & (frame["series"] == "EQ")
            & frame["isin"].str.startswith("INE")
        )
    elif "category" in frame.columns:
        mask = (frame["series"] == "EQ") & (frame["category"] == "Listed")
    else:
        mask = frame["series"] == "EQ"

    records = []
    for row in frame[mask].to_dict("records"):
        records.append(
            ReferenceRecord(
                symbol=row["symbol"],
                series=row["series"],
                name=row.get("name", ""),
                segment=row.get("segment", ""),
                instrument_type=row.get("instrument_type", ""),
                isin=row.get("isin", ""),
            )
        )
    return records


class NSEBhavcopyAPI(BaseReferenceDataAPI):
    """
    NSE archive client.

    Probes backward one day at a time (bounded by NSE_PROBE_DAYS) so that
    weekends and holidays resolve to the last trading day.
    """

    def __init__(self, session: requests.Session | None = None):
        self.settings = get_settings()
        self.base_url = self.settings.NSE_ARCHIVE_BASE_URL.rstrip("/")
        self.timeout = self.settings.NSE_TIMEOUT_SECONDS
        self.probe_days = self.settings.NSE_PROBE_DAYS

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
                "Cache-Control": "no-cache, no-store, must-revalidate",
                "Pragma": "no-cache",
                "Expires": "0",
            }
        )

    def fetch_listing_for(self, day: date) -> list[ReferenceRecord]:
        """
        Listing published for one day

        Raises:
            ReferenceDataError: If the archive is missing or unreadable
        """
        zip_name, csv_name = archive_names(day)
        try:
            resp = self.session.get(f"{self.base_url}/{zip_name}", timeout=self.timeout)
        except requests.RequestException as e:
            raise ReferenceDataError(f"{zip_name}: {e}") from e

        if not resp.ok:
            raise ReferenceDataError(f"{zip_name}: HTTP {resp.status_code}")

        try:
            with zipfile.ZipFile(io.BytesIO(resp.content)) as archive:
                member = next(
                    (
                        info
                        for info in archive.infolist()
                        if not info.is_dir() and PurePosixPath(info.filename).name == csv_name
                    ),
                    None,
                )
                if member is None:
                    raise ReferenceDataError(f"{zip_name}: {csv_name} not found in archive")

                with archive.open(member) as fh:
                    frame = pd.read_csv(fh, dtype=str, keep_default_na=False)
        except zipfile.BadZipFile as e:
            raise ReferenceDataError(f"{zip_name}: {e}") from e

        return filter_equities(frame)

    def fetch_latest_listing(self) -> tuple[list[ReferenceRecord], date]:
        day = datetime.now(self.settings.market_tz).date()

        for _ in range(self.probe_days):
            try:
                records = self.fetch_listing_for(day)
                if records:
                    logger.info(f"✓ Fetched {len(records)} stocks from NSE for {day.isoformat()}")
                    return records, day
                logger.warning(f"⚠️ Empty NSE listing for {day.isoformat()}")
            except ReferenceDataError as e:
                logger.warning(f"NSE archive probe missed: {e}")
            day -= timedelta(days=1)

        raise ReferenceDataError(f"no valid NSE listing in the last {self.probe_days} days")

    def close(self) -> None:
        self.session.close()
