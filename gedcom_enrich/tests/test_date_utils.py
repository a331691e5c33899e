import pytest

from gedcom_enrich.date_utils import extract_day, extract_month, extract_year, looks_like_year, zodiac_sign


@pytest.mark.parametrize(
    "text,expected",
    [
        ("15 MAR 1875", 1875),
        ("1875", 1875),
        ("ABT 1850", 1850),
        ("BET 1800 AND 1810", 1800),
        ("1875-03-15", 1875),
        ("12345", None),
        ("0999", None),
        ("2100", None),
        ("2099", 2099),
        ("Unknown", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_year(text, expected):
    assert extract_year(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("15 MAR 1875", 3),
        ("JUL 1960", 7),
        ("ABT DEC 1900", 12),
        ("1875-03-15", 3),
        ("1875", None),
        ("1875-13-01", None),
        ("Unknown", None),
        (None, None),
    ],
)
def test_extract_month(text, expected):
    assert extract_month(text) == expected


def test_looks_like_year_bounds():
    assert looks_like_year(1000)
    assert looks_like_year(2099)
    assert not looks_like_year(999)
    assert not looks_like_year(2100)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("15 MAR 1875", 15),
        ("ABT 3 JUN 1850", 3),
        ("1875-03-09", 9),
        ("1875-03", None),
        ("MAR 1875", None),
        ("1875", None),
        (None, None),
    ],
)
def test_extract_day(text, expected):
    assert extract_day(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1 JAN 1900", "Capricorn"),
        ("19 JAN 1900", "Capricorn"),
        ("20 JAN 1900", "Aquarius"),
        ("20 MAR 1900", "Pisces"),
        ("21 MAR 1900", "Aries"),
        ("1900-07-23", "Leo"),
        ("21 DEC 1900", "Sagittarius"),
        ("22 DEC 1900", "Capricorn"),
        ("JUL 1960", None),
        ("1962", None),
        (None, None),
    ],
)
def test_zodiac_sign(text, expected):
    """A sign is given only when both day and month are known."""
    assert zodiac_sign(text) == expected
