from __future__ import annotations

from datetime import date, datetime

import pytest

from utils import validation as v
from utils.currency import format_compact, format_currency
from utils.date_helpers import (
    next_month, parse_timestamp, prev_month, resolve_first_weekday, start_of_week,
    week_of_month,
)


def test_parse_amount() -> None:
    assert v.parse_amount("1,250.50") == 1250.5
    assert v.parse_amount(3) == 3.0
    for bad in ("", "abc", "0", "-4", "nan", "inf", "1e309", float("inf")):
        with pytest.raises(ValueError):
            v.parse_amount(bad)


def test_parse_optional_amount() -> None:
    assert v.parse_optional_amount("  ") == 0.0
    assert v.parse_optional_amount("12") == 12.0
    with pytest.raises(ValueError):
        v.parse_optional_amount("-1")
    for bad in ("inf", "nan"):
        with pytest.raises(ValueError):
            v.parse_optional_amount(bad)


def test_category_helpers() -> None:
    assert v.transaction_category(None) == "Other"
    assert v.transaction_category(" Food ") == "Food"
    with pytest.raises(ValueError):
        v.require_category("")


def test_credentials() -> None:
    assert v.validate_email(" Bob@Mail.COM ") == "bob@mail.com"
    with pytest.raises(ValueError):
        v.validate_email("not-an-email")
    with pytest.raises(ValueError):
        v.validate_password("12345")
    with pytest.raises(ValueError, match="Passwords do not match"):
        v.validate_passwords_match("abcdef", "abcdeg")


def test_date_helpers() -> None:
    assert start_of_week(date(2024, 3, 13)) == date(2024, 3, 11)
    assert start_of_week(date(2024, 3, 13), first_weekday=6) == date(2024, 3, 10)
    assert week_of_month(date(2024, 3, 7)) == 1
    assert week_of_month(date(2024, 3, 29)) == 5
    assert prev_month(date(2024, 1, 15)) == date(2023, 12, 1)
    assert next_month(date(2024, 12, 3)) == date(2025, 1, 1)
    assert parse_timestamp("2024-03-10") == datetime(2024, 3, 10)
    with pytest.raises(ValueError):
        parse_timestamp("10/03/2024")


def test_first_weekday_setting() -> None:
    assert resolve_first_weekday("6") == 6
    assert resolve_first_weekday(" 2 ") == 2
    for fallback in ("", "7", "sunday", "-1"):
        assert resolve_first_weekday(fallback) == 0


def test_currency_formatting() -> None:
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-3) == "-$3.00"
    assert format_compact(950) == "950"
    assert format_compact(1500) == "1.5K"
    assert format_compact(2_300_000) == "2.3M"
