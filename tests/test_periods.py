"""Tests for period-filter strings."""

import pytest

from receipt_tracker.periods import TimeFilter, build_period, check_period, is_valid_period


@pytest.mark.parametrize(
    "args, expected",
    [
        ((TimeFilter.CURRENT_YEAR,), "current-year"),
        ((TimeFilter.YEAR, 2024), "2024"),
        ((TimeFilter.MONTH, 2024, 3), "2024-03"),
        ((TimeFilter.MONTH, 2024, 12), "2024-12"),
    ],
)
def test_build_period(args, expected):
    assert build_period(*args) == expected


def test_build_period_last_months():
    assert build_period("months", last_months=6) == "last-6-months"


def test_build_period_missing_values():
    with pytest.raises(ValueError):
        build_period(TimeFilter.YEAR)
    with pytest.raises(ValueError):
        build_period(TimeFilter.MONTH, year=2024)
    with pytest.raises(ValueError):
        build_period(TimeFilter.MONTH, year=2024, month=13)
    with pytest.raises(ValueError):
        build_period(TimeFilter.MONTHS, last_months=0)


def test_build_period_unknown_filter():
    with pytest.raises(ValueError):
        build_period("week")


@pytest.mark.parametrize(
    "period", ["current-year", "2024", "2024-01", "2024-12", "last-3-months", "last-12-months"]
)
def test_valid_periods(period):
    assert is_valid_period(period)


@pytest.mark.parametrize(
    "period", ["", "24", "2024-13", "2024-00", "2024-1", "last-0-months", "last-months", "year"]
)
def test_invalid_periods(period):
    assert not is_valid_period(period)


def test_check_period():
    """None passes through; malformed strings are rejected before any request."""
    assert check_period(None) is None
    assert check_period("2024-03") == "2024-03"
    with pytest.raises(ValueError):
        check_period("March")
