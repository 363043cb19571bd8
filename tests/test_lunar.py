from datetime import date, timedelta

import pytest

from hijama_site.exceptions import DateOutOfRange, OutOfRangeDate
from hijama_site.lunar import (
    HIJRI_MONTHS,
    RECOMMENDED_DAYS,
    booking_window,
    check_booking_date,
    describe_date,
    format_long_date,
    format_short_date,
    is_recommended_day,
    recommended_days_in_month,
    to_lunar_date,
)


def _days(start: date, count: int):
    return [start + timedelta(days=i) for i in range(count)]


def test_known_conversion():
    hijri = to_lunar_date(date(2023, 3, 23))
    assert (hijri.day, hijri.month, hijri.year) == (1, "Ramadan", 1444)
    assert str(hijri) == "1 Ramadan 1444"


def test_umm_al_qura_dates():
    hijri = to_lunar_date(date(2025, 4, 11))
    assert (hijri.day, hijri.month, hijri.year) == (13, "Shawwal", 1446)
    assert is_recommended_day(date(2025, 4, 11))
    # Ramadan 1446 had 29 days
    assert str(to_lunar_date(date(2025, 3, 30))) == "1 Shawwal 1446"


def test_supported_range_edges():
    assert str(to_lunar_date(date(1924, 8, 1))) == "1 Muharram 1343"
    assert to_lunar_date(date(2077, 11, 16)).year == 1500


def test_lunar_days_advance_one_at_a_time():
    days = _days(date(2029, 12, 1), 400)
    prev = to_lunar_date(days[0])
    for d in days[1:]:
        cur = to_lunar_date(d)
        assert 1 <= cur.day <= 30
        assert cur.month in HIJRI_MONTHS
        if cur.day == 1:
            assert prev.day in (29, 30)
            assert HIJRI_MONTHS.index(cur.month) == (HIJRI_MONTHS.index(prev.month) + 1) % 12
            if cur.month == "Muharram":
                assert cur.year == prev.year + 1
        else:
            assert cur.day == prev.day + 1
            assert (cur.month, cur.year) == (prev.month, prev.year)
        prev = cur


@pytest.mark.parametrize("day", [date(1924, 7, 31), date(2077, 11, 17), date(622, 7, 18)])
def test_out_of_range(day):
    with pytest.raises(OutOfRangeDate):
        to_lunar_date(day)


def test_recommended_day_matches_lunar_day():
    for d in _days(date(2030, 1, 1), 120):
        assert is_recommended_day(d) == (to_lunar_date(d).day in RECOMMENDED_DAYS)


def test_recommended_days_in_month():
    days = recommended_days_in_month(2030, 2)
    assert days
    assert all(d.year == 2030 and d.month == 2 for d in days)
    assert days == sorted(set(days))
    assert all(is_recommended_day(d) for d in days)
    assert recommended_days_in_month(2030, 2) == days


def test_describe_date():
    info = describe_date(date(2023, 4, 4))
    assert info.is_recommended
    assert info.hijri.day == 13
    assert not describe_date(date(2023, 3, 23)).is_recommended


def test_booking_window():
    window = booking_window(date(2030, 1, 1))
    assert window.min_date == date(2030, 1, 2)
    assert window.max_date == date(2030, 1, 31)
    assert date(2030, 1, 1) not in window
    assert date(2030, 2, 1) not in window


def test_check_booking_date():
    today = date(2030, 1, 1)
    assert check_booking_date(date(2030, 1, 31), today) == date(2030, 1, 31)
    with pytest.raises(DateOutOfRange):
        check_booking_date(today, today)


def test_date_formats():
    assert format_long_date(date(2030, 1, 1)) == "Tuesday, January 1, 2030"
    assert format_short_date(date(2030, 1, 2)) == "Wed, Jan 2"


def test_date_formats_use_english_names():
    assert format_long_date(date(2025, 4, 11)) == "Friday, April 11, 2025"
    assert format_short_date(date(2025, 12, 1)) == "Mon, Dec 1"
