"""Data URL encoding and date display helpers."""

import re
from datetime import timedelta, timezone

import pytest

from utils.data_url import file_to_data_url, parse_data_url
from utils.dates import format_date, now_iso, parse_iso


class TestDataUrl:
    def test_encode(self):
        assert file_to_data_url(b"hi", "text/plain") == "data:text/plain;base64,aGk="

    def test_encode_without_mimetype(self):
        assert file_to_data_url(b"", None).startswith("data:application/octet-stream;base64,")

    def test_decode(self):
        assert parse_data_url("data:image/png;base64,aGk=") == ("image/png", b"hi")

    @pytest.mark.parametrize("bad", [
        "",
        "http://example.org/a.png",
        "data:image/png;base64",
        "data:text/plain,hello",
        "data:image/png;base64,@@@",
    ])
    def test_decode_rejects(self, bad):
        with pytest.raises(ValueError):
            parse_data_url(bad)


class TestDates:
    def test_now_iso_shape(self):
        assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", now_iso())

    def test_parse_iso_z_suffix(self):
        assert parse_iso("2026-10-19T15:05:00.000Z").tzinfo is not None

    def test_format_afternoon(self):
        assert format_date("2026-10-19T15:05:00.000Z", tz=timezone.utc) == "October 19, 2026 at 3:05 PM"

    def test_format_midnight_and_noon(self):
        assert format_date("2026-01-02T00:07:00.000Z", tz=timezone.utc) == "January 2, 2026 at 12:07 AM"
        assert format_date("2026-01-02T12:00:00.000Z", tz=timezone.utc) == "January 2, 2026 at 12:00 PM"

    def test_format_converts_timezone(self):
        east = timezone(timedelta(hours=2))
        assert format_date("2026-12-31T23:30:00.000Z", tz=east) == "January 1, 2027 at 1:30 AM"

    def test_format_without_tz_uses_local_time(self):
        assert "2026" in format_date("2026-06-15T12:00:00.000Z")
