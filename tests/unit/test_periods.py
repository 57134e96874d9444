"""Unit tests for period resolution"""

import pytest
from datetime import date, datetime, timedelta, timezone
from finance_gateway.domain.exceptions import InvalidPeriod, ValidationError
from finance_gateway.domain.models import PeriodRange
from finance_gateway.domain.periods import SUPPORTED_PERIODS, is_valid_period, resolve_period

NOW = datetime(2026, 10, 18, 15, 30, tzinfo=timezone.utc)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_current_month():
    """current_month starts on day 1 00:00 and ends at the next month's start"""
    period = resolve_period("current_month", NOW)

    assert period.start == utc(2026, 10, 1)
    assert period.end == utc(2026, 11, 1)
    assert period.label == "October 2026"
    assert period.token == "current_month"


def test_last_month_across_year_boundary():
    """last_month in January is December of the previous year"""
    period = resolve_period("last_month", utc(2027, 1, 5, 8, 0))

    assert period.start == utc(2026, 12, 1)
    assert period.end == utc(2027, 1, 1)
    assert period.label == "December 2026"


def test_current_month_in_december():
    """December rolls the exclusive end into January"""
    period = resolve_period("current_month", utc(2026, 12, 31, 23, 59, 59))

    assert period.start == utc(2026, 12, 1)
    assert period.end == utc(2027, 1, 1)


@pytest.mark.parametrize(
    "now, start, end, label",
    [
        (utc(2026, 1, 1), utc(2026, 1, 1), utc(2026, 4, 1), "Q1 2026"),
        (utc(2026, 3, 31, 23, 59), utc(2026, 1, 1), utc(2026, 4, 1), "Q1 2026"),
        (utc(2026, 5, 15), utc(2026, 4, 1), utc(2026, 7, 1), "Q2 2026"),
        (utc(2026, 10, 18), utc(2026, 10, 1), utc(2027, 1, 1), "Q4 2026"),
    ],
)
def test_current_quarter(now, start, end, label):
    """Quarters are calendar aligned"""
    period = resolve_period("current_quarter", now)

    assert (period.start, period.end, period.label) == (start, end, label)


def test_last_year():
    """last_year covers Jan 1 to Jan 1 of the previous calendar year"""
    period = resolve_period("last_year", NOW)

    assert period.start == utc(2025, 1, 1)
    assert period.end == utc(2026, 1, 1)
    assert period.label == "2025"


@pytest.mark.parametrize("token", SUPPORTED_PERIODS)
def test_every_period_is_ordered_and_aligned(token):
    """start < end and both fall on midnight of the 1st"""
    period = resolve_period(token, NOW)

    assert period.start < period.end
    for boundary in (period.start, period.end):
        assert boundary.day == 1
        assert (boundary.hour, boundary.minute, boundary.second, boundary.microsecond) == (0, 0, 0, 0)


def test_adjacent_months_share_an_edge():
    """Half-open windows neither overlap nor leave gaps"""
    last_month = resolve_period("last_month", NOW)
    current_month = resolve_period("current_month", NOW)

    assert last_month.end == current_month.start
    assert not last_month.contains(current_month.start)
    assert current_month.contains(current_month.start)


def test_last_day_is_inclusive_end():
    """last_day is the day before the exclusive end"""
    period = resolve_period("current_month", NOW)

    assert period.first_day == date(2026, 10, 1)
    assert period.last_day == date(2026, 10, 31)


def test_naive_now_is_treated_as_utc():
    """Naive instants are read as UTC"""
    assert resolve_period("current_month", datetime(2026, 10, 18)) == resolve_period("current_month", NOW)


def test_resolution_is_deterministic():
    """Same token and instant give the same range"""
    assert resolve_period("current_quarter", NOW) == resolve_period("current_quarter", NOW)


@pytest.mark.parametrize("token", ["bogus", "", "CURRENT_MONTH", "next_month"])
def test_invalid_period(token):
    """Tokens outside the closed set are rejected"""
    with pytest.raises(InvalidPeriod):
        resolve_period(token, NOW)

    assert not is_valid_period(token)


def test_invalid_period_is_validation_error():
    """InvalidPeriod maps to the 400 family"""
    assert issubclass(InvalidPeriod, ValidationError)


def test_period_range_rejects_empty_window():
    """start must precede end"""
    with pytest.raises(ValueError):
        PeriodRange(token="x", label="x", start=NOW, end=NOW)

    with pytest.raises(ValueError):
        PeriodRange(token="x", label="x", start=NOW, end=NOW - timedelta(days=1))
