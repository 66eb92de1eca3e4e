"""Display formatting for money, dates and counts.

All helpers are pure: same input and locale, same string. Money is rounded
half-up to two decimals through ``Decimal`` so that binary float noise never
leaks into a rendered amount.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

DEFAULT_LOCALE = "en-US"
CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}

_EN_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_DE_MONTHS = ("Jan.", "Feb.", "März", "Apr.", "Mai", "Juni", "Juli", "Aug.", "Sept.", "Okt.", "Nov.", "Dez.")
_FR_MONTHS = ("janv.", "févr.", "mars", "avr.", "mai", "juin", "juil.", "août", "sept.", "oct.", "nov.", "déc.")


@dataclass(frozen=True)
class NumberLocale:
    code: str
    group_separator: str
    decimal_separator: str
    symbol_first: bool
    symbol_gap: str
    months: tuple[str, ...]
    date_pattern: str


LOCALES: dict[str, NumberLocale] = {
    "en-US": NumberLocale("en-US", ",", ".", True, "", _EN_MONTHS, "{month} {day}, {year}"),
    "en-GB": NumberLocale("en-GB", ",", ".", True, "", _EN_MONTHS, "{day} {month} {year}"),
    "de-DE": NumberLocale("de-DE", ".", ",", False, "\u00a0", _DE_MONTHS, "{day}. {month} {year}"),
    "fr-FR": NumberLocale("fr-FR", "\u202f", ",", False, "\u00a0", _FR_MONTHS, "{day} {month} {year}"),
}


def resolve_locale(locale: str | NumberLocale | None) -> NumberLocale:
    if isinstance(locale, NumberLocale):
        return locale
    key = (locale or DEFAULT_LOCALE).replace("_", "-")
    if key in LOCALES:
        return LOCALES[key]
    language = key.split("-", 1)[0].lower()
    for code, rules in LOCALES.items():
        if code.split("-", 1)[0] == language:
            return rules
    return LOCALES[DEFAULT_LOCALE]


def _to_decimal(value: object) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return Decimal(0)
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)
    return parsed if parsed.is_finite() else Decimal(0)


def _group(digits: str, rules: NumberLocale) -> str:
    # digits is produced with "," grouping and "." decimals
    return digits.replace(",", "\0").replace(".", rules.decimal_separator).replace("\0", rules.group_separator)


def format_currency(value: object, locale: str | NumberLocale | None = None, currency: str = "USD") -> str:
    rules = resolve_locale(locale)
    amount = _to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    body = _group(f"{abs(amount):,.2f}", rules)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    sign = "-" if amount < 0 else ""
    if rules.symbol_first:
        return f"{sign}{symbol}{rules.symbol_gap}{body}"
    return f"{sign}{body}{rules.symbol_gap}{symbol}"


def format_count(value: object, locale: str | NumberLocale | None = None) -> str:
    rules = resolve_locale(locale)
    count = int(_to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    sign = "-" if count < 0 else ""
    return f"{sign}{_group(f'{abs(count):,}', rules)}"


def format_percent(value: object, decimals: int = 1, signed: bool = True, locale: str | NumberLocale | None = None) -> str:
    rules = resolve_locale(locale)
    quantum = Decimal(1).scaleb(-decimals)
    amount = _to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    body = _group(f"{abs(amount):,.{decimals}f}", rules)
    if amount < 0:
        sign = "-"
    elif signed and amount > 0:
        sign = "+"
    else:
        sign = ""
    return f"{sign}{body}%"


def parse_date(value: dt.date | dt.datetime | str) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("Empty date value")
    if len(text) == 10:
        return dt.date.fromisoformat(text)
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    return dt.datetime.fromisoformat(text).date()


def format_date(value: dt.date | dt.datetime | str | None, locale: str | NumberLocale | None = None) -> str:
    if value is None or value == "":
        return "—"
    rules = resolve_locale(locale)
    day = parse_date(value)
    return rules.date_pattern.format(month=rules.months[day.month - 1], day=day.day, year=day.year)
