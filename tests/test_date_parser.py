"""Tests for date parsing and reporting ranges."""

import pytest
from datetime import date, timedelta
from dayledger.utils.date_parser import (
    get_date_range,
    last_n_days,
    month_range,
    parse_date,
    parse_month,
)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date(" Today ") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    assert parse_date("tomorrow") == date.today() + timedelta(days=1)


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_parse_month():
    assert parse_month("2024-03") == (2024, 3)


@pytest.mark.parametrize("value", ["2024", "2024-13", "2024-00", "March", "2024-3-1"])
def test_parse_month_invalid(value):
    with pytest.raises(ValueError, match="Invalid month"):
        parse_month(value)


def test_month_range_leap_february():
    assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_range(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))


def test_last_n_days_includes_today():
    start, end = last_n_days(7, today=date(2024, 3, 10))
    assert start == date(2024, 3, 4)
    assert end == date(2024, 3, 10)


def test_get_date_range_this_month():
    """This month covers the whole calendar month."""
    start, end = get_date_range("this-month", today=date(2024, 4, 17))
    assert start == date(2024, 4, 1)
    assert end == date(2024, 4, 30)


def test_get_date_range_last_month_across_year():
    start, end = get_date_range("last-month", today=date(2024, 1, 31))
    assert start == date(2023, 12, 1)
    assert end == date(2023, 12, 31)


def test_get_date_range_last_30_days():
    start, end = get_date_range("last-30-days", today=date(2024, 3, 30))
    assert start == date(2024, 3, 1)
    assert end == date(2024, 3, 30)


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("invalid-period")
