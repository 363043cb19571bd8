"""Hijri calendar helpers used by the appointment form's date advisor.

Conversion follows the Umm al-Qura calendar through ``hijridate``, which
covers 1 Muharram 1343 AH (1924-08-01) to 30 Dhul Hijjah 1500 AH
(2077-11-16). Dates outside that range raise ``OutOfRangeDate``.
"""
from __future__ import annotations

import calendar
from datetime import date, timedelta

from hijridate import Gregorian

from .exceptions import DateOutOfRange, OutOfRangeDate
from .models import BookingWindow, DateInfo, HijriDate

HIJRI_MONTHS = (
    "Muharram", "Safar", "Rabi al-Awwal", "Rabi al-Thani",
    "Jumada al-Awwal", "Jumada al-Thani", "Rajab", "Shaban",
    "Ramadan", "Shawwal", "Dhul Qadah", "Dhul Hijjah",
)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# 13-15 are the "white days"; 17, 19 and 21 are the days named for hijama
RECOMMENDED_DAYS = frozenset({13, 14, 15, 17, 19, 21})

BOOKING_HORIZON_DAYS = 30

FIRST_SUPPORTED = date(1924, 8, 1)
LAST_SUPPORTED = date(2077, 11, 16)


def to_lunar_date(gregorian: date) -> HijriDate:
    """Return the Umm al-Qura day, month name and year for a Gregorian date."""
    try:
        hijri = Gregorian(gregorian.year, gregorian.month, gregorian.day).to_hijri()
    except (OverflowError, ValueError):
        raise OutOfRangeDate(gregorian) from None
    return HijriDate(day=hijri.day, month=HIJRI_MONTHS[hijri.month - 1], year=hijri.year)


def is_recommended_day(gregorian: date) -> bool:
    return to_lunar_date(gregorian).day in RECOMMENDED_DAYS


def recommended_days_in_month(year: int, month: int) -> list[date]:
    """All dates of a Gregorian month that fall on a recommended lunar day, ascending."""
    _, last = calendar.monthrange(year, month)
    days = (date(year, month, d) for d in range(1, last + 1))
    return [d for d in days if is_recommended_day(d)]


def describe_date(gregorian: date) -> DateInfo:
    hijri = to_lunar_date(gregorian)
    return DateInfo(hijri=hijri, is_recommended=hijri.day in RECOMMENDED_DAYS)


def booking_window(today: date) -> BookingWindow:
    """Selectable dates: tomorrow through 30 days from today, inclusive."""
    return BookingWindow(
        min_date=today + timedelta(days=1),
        max_date=today + timedelta(days=BOOKING_HORIZON_DAYS),
    )


def check_booking_date(selected: date, today: date) -> date:
    window = booking_window(today)
    if selected not in window:
        raise DateOutOfRange(selected, window.min_date, window.max_date)
    return selected


def format_long_date(value: date) -> str:
    """``Tuesday, January 1, 2030``"""
    return f"{WEEKDAYS[value.weekday()]}, {MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_short_date(value: date) -> str:
    """``Tue, Jan 1``"""
    return f"{WEEKDAYS[value.weekday()][:3]}, {MONTHS[value.month - 1][:3]} {value.day}"
