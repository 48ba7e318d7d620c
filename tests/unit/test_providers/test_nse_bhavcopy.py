"""
Unit tests for the NSE bhavcopy reference-data client

Tests archive naming, equity filtering and the backward probe using
in-memory zip archives.
"""

import io
import zipfile
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from core.exceptions import ReferenceDataError
from providers.nse.bhavcopy import NSEBhavcopyAPI, archive_names, filter_equities

NEW_FORMAT_CSV = (
    "Segment,Symbol,Series,Security Name,Instrument Type,ISIN\n"
    "CM,RELIANCE,EQ,Reliance Industries Limited,STK,INE002A01018\n"
    "CM,TCS,EQ,Tata Consultancy Services Limited,STK,INE467B01029\n"
    "CM,GOLDBEES,EQ,Nippon India ETF Gold BeES,ETF,INF204KB17I5\n"
    "CM,SGBMAR29,GB,Sovereign Gold Bond,STK,IN0020230184\n"
    "FO,NIFTY,EQ,Nifty Futures,STK,INE000000000\n"
)

OLD_FORMAT_CSV = (
    "Symbol ,Series ,Security Name ,Category ,Market Cap\n"
    "INFY,EQ,Infosys Limited,Listed,6000000\n"
    "OLDCO,EQ,Old Company Limited,Suspended,10\n"
    "BONDX,N1,Some Bond,Listed,100\n"
)


def frame(csv_text: str) -> pd.DataFrame:
    return pd.read_csv(io.StringIO(csv_text), dtype=str, keep_default_na=False)


def archive(day: date, csv_text: str, folder: str = "") -> bytes:
    """Zip holding the MCAP csv for a day"""
    _, csv_name = archive_names(day)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(f"{folder}{csv_name}", csv_text)
        zf.writestr("Readme.txt", "ignore me")
    return buffer.getvalue()


def response(status_code=200, content=b""):
    resp = MagicMock()
    resp.ok = status_code == 200
    resp.status_code = status_code
    resp.content = content
    return resp


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.mark.unit
class TestArchiveNames:
    """Test archive file naming"""

    def test_names(self):
        assert archive_names(date(2024, 3, 5)) == ("PR050324.zip", "MCAP05032024.csv")


@pytest.mark.unit
class TestFilterEquities:
    """Test equity filtering across archive formats"""

    def test_new_format(self):
        records = filter_equities(frame(NEW_FORMAT_CSV))

        assert [r.symbol for r in records] == ["RELIANCE", "TCS"]
        assert records[0].name == "Reliance Industries Limited"
        assert records[0].isin == "INE002A01018"

    def test_old_format_with_padded_headers(self):
        records = filter_equities(frame(OLD_FORMAT_CSV))

        assert [r.symbol for r in records] == ["INFY"]
        assert records[0].series == "EQ"

    def test_unexpected_columns(self):
        with pytest.raises(ReferenceDataError, match="unexpected archive columns"):
            filter_equities(frame("Foo,Bar\n1,2\n"))


@pytest.mark.unit
class TestNSEBhavcopyAPI:
    """Test archive download and probing"""

    def test_fetch_listing_for_day(self, session):
        day = date(2024, 3, 5)
        session.get.return_value = response(content=archive(day, NEW_FORMAT_CSV, folder="PR/"))
        api = NSEBhavcopyAPI(session=session)

        records = api.fetch_listing_for(day)

        assert [r.symbol for r in records] == ["RELIANCE", "TCS"]
        url = session.get.call_args.args[0]
        assert url.endswith("/PR050324.zip")
        assert "User-Agent" in session.headers

    def test_missing_member(self, session):
        day = date(2024, 3, 5)
        session.get.return_value = response(content=archive(date(2024, 3, 4), NEW_FORMAT_CSV))
        api = NSEBhavcopyAPI(session=session)

        with pytest.raises(ReferenceDataError, match="not found in archive"):
            api.fetch_listing_for(day)

    def test_bad_zip(self, session):
        session.get.return_value = response(content=b"<html>not a zip</html>")
        api = NSEBhavcopyAPI(session=session)

        with pytest.raises(ReferenceDataError):
            api.fetch_listing_for(date(2024, 3, 5))

    def test_probes_back_to_last_trading_day(self, session):
        # Sunday 2024-03-10 → Saturday missing → Friday 2024-03-08 published
        friday = date(2024, 3, 8)

        def get(url, timeout):
            if url.endswith("PR080324.zip"):
                return response(content=archive(friday, NEW_FORMAT_CSV))
            return response(status_code=404)

        session.get.side_effect = get
        api = NSEBhavcopyAPI(session=session)

        with patch("providers.nse.bhavcopy.datetime") as clock:
            clock.now.return_value = datetime(2024, 3, 10, 9, 0)
            records, trading_day = api.fetch_latest_listing()

        assert trading_day == friday
        assert len(records) == 2
        assert session.get.call_count == 3

    def test_no_listing_in_probe_window(self, session):
        session.get.return_value = response(status_code=404)
        api = NSEBhavcopyAPI(session=session)

        with pytest.raises(ReferenceDataError, match="no valid NSE listing"):
            api.fetch_latest_listing()
        assert session.get.call_count == api.probe_days

    def test_close(self, session):
        NSEBhavcopyAPI(session=session).close()

        session.close.assert_called_once()
