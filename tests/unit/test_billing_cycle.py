"""Unit tests for day-of-month arithmetic"""

import pytest
from datetime import date
from smart_ledger.domain.billing_cycle import (
    calendar_days_until,
    current_cycle,
    days_until,
    distance_to,
    due_soon,
    is_within_calendar_window,
    is_within_window,
    next_occurrence,
)
from smart_ledger.domain.options import CALENDAR, FIXED_30

DAYS = range(1, 32)


@pytest.mark.parametrize(
    "today,target,expected",
    [
        (28, 5, 7),  # wraps: (30 - 28) + 5
        (10, 20, 10),
        (15, 15, 0),
        (31, 1, 0),  # 30-day month makes day 31 meet day 1
        (1, 31, 30),
    ],
)
def test_days_until_examples(today, target, expected):
    assert days_until(today, target) == expected


@pytest.mark.parametrize("today", DAYS)
@pytest.mark.parametrize("target", DAYS)
def test_days_until_full_domain(today, target):
    """Non-negative, bounded by the 30-day month, and reproducible"""
    result = days_until(today, target)

    assert 0 <= result <= 30
    assert result == days_until(today, target)
    if target >= today:
        assert result == target - today


@pytest.mark.parametrize("today_day", DAYS)
@pytest.mark.parametrize("target", DAYS)
def test_window_full_domain_is_deterministic(today_day, target):
    today = date(2024, 1, today_day)
    first = is_within_window(today, target)

    assert first == is_within_window(today, target)
    if today_day <= target <= today_day + 7:
        assert first is True


def test_window_rollover_includes_early_next_month():
    """26 > 24 and 2 <= (26 + 7) % 31"""
    today = date(2024, 3, 26)
    assert is_within_window(today, 2) is True
    assert is_within_window(today, 15) is False


def test_window_no_rollover_before_day_25():
    today = date(2024, 3, 24)
    assert is_within_window(today, 31) is True
    assert is_within_window(today, 1) is False


def test_window_inclusive_bounds():
    today = date(2024, 3, 10)
    assert is_within_window(today, 10) is True
    assert is_within_window(today, 17) is True
    assert is_within_window(today, 18) is False
    assert is_within_window(today, 9) is False


def test_window_custom_width():
    today = date(2024, 3, 10)
    assert is_within_window(today, 20, window_days=10) is True
    assert is_within_window(today, 20, window_days=3) is False


def test_next_occurrence_same_month():
    assert next_occurrence(date(2024, 3, 10), 15) == date(2024, 3, 15)
    assert next_occurrence(date(2024, 3, 15), 15) == date(2024, 3, 15)


def test_next_occurrence_rolls_into_next_month():
    assert next_occurrence(date(2024, 3, 20), 5) == date(2024, 4, 5)
    assert next_occurrence(date(2024, 12, 20), 5) == date(2025, 1, 5)


def test_next_occurrence_clamps_short_months():
    assert next_occurrence(date(2024, 2, 10), 31) == date(2024, 2, 29)
    assert next_occurrence(date(2023, 2, 10), 30) == date(2023, 2, 28)


def test_calendar_distance_differs_from_fixed_month():
    # February 2024 has 29 days
    today = date(2024, 2, 28)
    assert calendar_days_until(today, 5) == 6
    assert days_until(today.day, 5) == 7


def test_calendar_window():
    today = date(2024, 2, 26)
    assert is_within_calendar_window(today, 4) is True
    assert is_within_calendar_window(today, 5) is False


@pytest.mark.parametrize("today_day", DAYS)
@pytest.mark.parametrize("target", DAYS)
def test_calendar_distance_full_domain(today_day, target):
    today = date(2024, 1, today_day)
    result = calendar_days_until(today, target)

    assert 0 <= result <= 31
    assert next_occurrence(today, target) >= today


def test_dispatch_by_calendar_mode():
    today = date(2024, 2, 28)
    assert distance_to(today, 5, FIXED_30) == 7
    assert distance_to(today, 5, CALENDAR) == 6
    assert due_soon(date(2024, 3, 26), 2, 7, FIXED_30) is True
    assert due_soon(date(2024, 3, 26), 2, 7, CALENDAR) is True
    assert due_soon(date(2024, 3, 26), 3, 7, FIXED_30) is False
    assert due_soon(date(2024, 3, 26), 2, 6, CALENDAR) is False


def test_current_cycle_after_closing_day():
    start, end = current_cycle(date(2024, 3, 27), closing_day=25)
    assert start == date(2024, 3, 26)
    assert end == date(2024, 4, 25)


def test_current_cycle_on_closing_day():
    start, end = current_cycle(date(2024, 3, 25), closing_day=25)
    assert start == date(2024, 2, 26)
    assert end == date(2024, 3, 25)


def test_current_cycle_short_month():
    start, end = current_cycle(date(2024, 3, 10), closing_day=31)
    assert start == date(2024, 3, 1)  # Feb closes on the 29th
    assert end == date(2024, 3, 31)
