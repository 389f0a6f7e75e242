"""Unit tests for the CCCD QR decoder and display-date formatting."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date
from parking_registry.utils.qr_parser import decode_qr, format_display_date, normalize_gender


class TestDecodeQR:
    def test_full_payload(self):
        payload = decode_qr("123456789|987654|Nguyen Van A|01-01-1990|Nam|Hà Nội|01-01-2020")
        assert payload.national_id == "123456789"
        assert payload.old_id == "987654"
        assert payload.full_name == "Nguyen Van A"
        assert payload.date_of_birth == "01/01/1990"
        assert payload.gender == "male"
        assert payload.hometown == "Hà Nội"
        assert payload.id_issue_date == "01/01/2020"

    def test_card_style_dates_and_missing_old_id(self):
        payload = decode_qr("001090001234||Tran Thi B|15081995|Nữ|Hải Phòng|20042021")
        assert payload.old_id == ""
        assert payload.date_of_birth == "15/08/1995"
        assert payload.gender == "female"
        assert payload.id_issue_date == "20/04/2021"

    def test_truncated_payload(self):
        payload = decode_qr("123456789")
        assert payload.national_id == "123456789"
        assert payload.full_name is None
        assert payload.to_dict()["nationalId"] == "123456789"


class TestDisplayDate:
    def test_formats(self):
        assert format_display_date("01/02/2000") == "01/02/2000"
        assert format_display_date("01-02-2000") == "01/02/2000"
        assert format_display_date("2000-02-01") == "01/02/2000"
        assert format_display_date(date(2000, 2, 1)) == "01/02/2000"

    def test_empty_and_unknown(self):
        assert format_display_date(None) == ""
        assert format_display_date("sometime") == "sometime"


def test_gender_aliases():
    assert normalize_gender("Nam") == "male"
    assert normalize_gender("Khác") == "other"
    assert normalize_gender("female") == "female"
    assert normalize_gender("unknown") is None
