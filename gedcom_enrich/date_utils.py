# gedcom_enrich/date_utils.py
"""Helpers for pulling coarse values (year, month, day) out of free-text GEDCOM dates.
Helpers for pulling coarse values (year, month) out of free-text GEDCOM dates.

All helpers degrade to None on anything they cannot read; they never raise for
malformed text.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from ged4py.date import DateValue

logger = logging.getLogger(__name__)

MIN_YEAR = 1000
MAX_YEAR = 2100

_MONTH_ABBR_TO_NUM = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

YEAR_RE = re.compile(r'(?<!\d)(\d{4})(?!\d)')
ISO_DATE_RE = re.compile(r'^\s*(\d{4})-(\d{1,2})(?:-(\d{1,2}))?')
MONTH_RE = re.compile(r'\b(JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC)[A-Z]*\b', re.IGNORECASE)
DAY_MONTH_RE = re.compile(r'(?<!\d)(\d{1,2})\s+(?:JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC)[A-Z]*\b', re.IGNORECASE)


def looks_like_year(num: int, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR) -> bool:
    """Check whether a number is a plausible genealogical year (min_year <= num < max_year)."""
    return min_year <= num < max_year


def extract_year(date_text: Optional[str]) -> Optional[int]:
    """
    Extract the first standalone 4-digit year from a date string.

    Handles GEDCOM forms ("15 MAR 1875", "ABT 1850", "BET 1800 AND 1810")
    and ISO forms ("1875-03-15").

    Args:
        date_text (Optional[str]): Free-text date.

    Returns:
        Optional[int]: Year, or None if no plausible 4-digit year is present.
    """
    if not date_text:
        return None
    match = YEAR_RE.search(str(date_text))
    if not match:
        return None
    year = int(match.group(1))
    return year if looks_like_year(year) else None


def _calendar_date(date_text: str) -> Any:
    """Use ged4py to find the first calendar date of a (possibly qualified) GEDCOM date."""
    try:
        value = DateValue.parse(date_text)
    except (ValueError, TypeError) as e:
        logger.debug(f"ged4py could not parse date '{date_text}': {e}")
        return None
    # simple/about/before/after carry .date, ranges and periods carry .date1
    return getattr(value, 'date', None) or getattr(value, 'date1', None)


def _month_from_date_value(date_text: str) -> Optional[int]:
    month = getattr(_calendar_date(date_text), 'month', None)
    if isinstance(month, str):
        return _MONTH_ABBR_TO_NUM.get(month.upper()[:3])
    return None


def extract_month(date_text: Optional[str]) -> Optional[int]:
    """
    Extract the month (1-12) from a date string.

    Args:
        date_text (Optional[str]): Free-text date.

    Returns:
        Optional[int]: Month number, or None when the date has no month.
    """
    if not date_text:
        return None
    text = str(date_text).strip()

    iso = ISO_DATE_RE.match(text)
    if iso:
        month = int(iso.group(2))
        return month if 1 <= month <= 12 else None

    month = _month_from_date_value(text)
    if month:
        return month

    match = MONTH_RE.search(text)
    if match:
        return _MONTH_ABBR_TO_NUM.get(match.group(1).upper())
    return None


def extract_day(date_text: Optional[str]) -> Optional[int]:
    """
    Extract the day of the month from a date string.

    Args:
        date_text (Optional[str]): Free-text date.

    Returns:
        Optional[int]: Day (1-31), or None when the date has no day.
    """
    if not date_text:
        return None
    text = str(date_text).strip()

    iso = ISO_DATE_RE.match(text)
    if iso:
        day = int(iso.group(3)) if iso.group(3) else None
    else:
        day = getattr(_calendar_date(text), 'day', None)
        if not isinstance(day, int):
            match = DAY_MONTH_RE.search(text)
            day = int(match.group(1)) if match else None
    return day if day is not None and 1 <= day <= 31 else None


# last (month, day) of each sign, in calendar order
ZODIAC_SIGNS = (
    ((1, 19), "Capricorn"),
    ((2, 18), "Aquarius"),
    ((3, 20), "Pisces"),
    ((4, 19), "Aries"),
    ((5, 20), "Taurus"),
    ((6, 20), "Gemini"),
    ((7, 22), "Cancer"),
    ((8, 22), "Leo"),
    ((9, 22), "Virgo"),
    ((10, 22), "Libra"),
    ((11, 21), "Scorpio"),
    ((12, 21), "Sagittarius"),
    ((12, 31), "Capricorn"),
)


def zodiac_sign(date_text: Optional[str]) -> Optional[str]:
    """Western zodiac sign for a date, or None unless both day and month are known."""
    month = extract_month(date_text)
    day = extract_day(date_text)
    if month is None or day is None:
        return None
    for last_day, sign in ZODIAC_SIGNS:
        if (month, day) <= last_day:
            return sign
    return None
