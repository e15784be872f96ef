from datetime import datetime, timedelta, timezone

import pytest

from apps.banksampah.utils.formatting import format_date, format_rupiah


@pytest.mark.parametrize(
    "amount,expected",
    [
        (14500, "Rp 14.500"),
        (0, "Rp 0"),
        (1250000, "Rp 1.250.000"),
        (-5000, "-Rp 5.000"),
        ("9500", "Rp 9.500"),
    ],
)
def test_format_rupiah(amount, expected):
    assert format_rupiah(amount) == expected


def test_format_date_shows_wib():
    assert format_date(datetime(2026, 10, 19, 3, 30, tzinfo=timezone.utc)) == "19 Okt 2026 10:30"
    assert format_date(datetime(2026, 5, 2, 17, 5, tzinfo=timezone.utc)) == "03 Mei 2026 00:05"


def test_format_date_naive_is_utc_and_other_offsets_convert():
    assert format_date(datetime(2026, 10, 19, 3, 30)) == "19 Okt 2026 10:30"
    wita = timezone(timedelta(hours=8))
    assert format_date(datetime(2026, 10, 19, 11, 30, tzinfo=wita)) == "19 Okt 2026 10:30"
