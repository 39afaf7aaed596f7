from datetime import date

import pytest

from portal.templatetags.randevu_tags import hhmm, tr_date, tr_datetime


def test_tr_date():
    assert tr_date("2025-10-15") == "15 Ekim 2025"
    assert tr_date(date(2026, 1, 2)) == "2 Ocak 2026"
    assert tr_date("") == ""


@pytest.mark.parametrize("raw", ["2025-10-15T07:05:00.1234567+00:00", "2025-10-15T07:05:00Z"])
def test_tr_datetime_converts_to_istanbul(settings, raw):
    settings.TIME_ZONE = "Europe/Istanbul"
    assert tr_datetime(raw) == "15 Ekim 2025 10:05"


def test_tr_datetime_keeps_unparseable_text():
    assert tr_datetime("bilinmiyor") == "bilinmiyor"
    assert tr_datetime(None) == ""


def test_hhmm_filter():
    assert hhmm("09:30:00") == "09:30"
