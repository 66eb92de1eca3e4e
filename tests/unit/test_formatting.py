import datetime as dt

import pytest

from backoffice_console.app.formatting import format_count, format_currency, format_date, format_percent, parse_date


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "$0.00"),
        (1234.5, "$1,234.50"),
        (-1, "-$1.00"),
        (0.005, "$0.01"),
        (2.675, "$2.68"),
        ("1999.999", "$2,000.00"),
        (None, "$0.00"),
        (float("nan"), "$0.00"),
    ],
)
def test_format_currency_en_us(value: object, expected: str) -> None:
    assert format_currency(value) == expected


def test_format_currency_other_locales() -> None:
    assert format_currency(1234.5, "de-DE") == "1.234,50\u00a0$"
    assert format_currency(1234.5, "en-GB", currency="GBP") == "£1,234.50"


def test_unknown_locale_falls_back_to_default() -> None:
    assert format_currency(5, "xx-YY") == "$5.00"


def test_format_count_groups_thousands() -> None:
    assert format_count(1234567) == "1,234,567"
    assert format_count(0) == "0"


def test_format_percent_is_signed() -> None:
    assert format_percent(12.345) == "+12.3%"
    assert format_percent(-4) == "-4.0%"
    assert format_percent(0) == "0.0%"
    assert format_percent(10, decimals=0, signed=False) == "10%"


def test_format_date_accepts_dates_and_iso_strings() -> None:
    assert format_date(dt.date(2024, 3, 5)) == "Mar 5, 2024"
    assert format_date("2024-03-05") == "Mar 5, 2024"
    assert format_date("2024-03-05T23:10:00Z") == "Mar 5, 2024"
    assert format_date(None) == "—"


def test_parse_date_rejects_empty_text() -> None:
    with pytest.raises(ValueError):
        parse_date("  ")
