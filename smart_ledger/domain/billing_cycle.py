"""Day-of-month arithmetic for card cycles, recurring expenses and installment due days"""

from datetime import date, timedelta

from smart_ledger.domain.options import CALENDAR
from smart_ledger.utils.date_utils import clamp_day, shift_months

# Months are treated as 30 days long when measuring distance to a day of month
APPROX_MONTH_DAYS = 30
# Past this day of month the reminder window also accepts early days of next month
ROLLOVER_THRESHOLD_DAY = 24


def days_until(today: int, target_day: int) -> int:
    """
    Days from day-of-month ``today`` until ``target_day`` next occurs.

    Uses a fixed 30-day month, so the result diverges from real calendar
    distance around 28/29/31-day months.

    Example:
        days_until(28, 5) == 7   (30 - 28) + 5
        days_until(10, 20) == 10
    """
    if target_day >= today:
        return target_day - today
    return (APPROX_MONTH_DAYS - today) + target_day


def is_within_window(today: date, target_day: int, window_days: int = 7) -> bool:
    """
    True when ``target_day`` falls between today's day of month and
    today + window_days, inclusive.

    Late in the month (after day 24) early days of the next month are
    accepted too: target_day <= (today + window_days) mod 31.
    """
    today_day = today.day
    if today_day <= target_day <= today_day + window_days:
        return True
    return today_day > ROLLOVER_THRESHOLD_DAY and target_day <= (today_day + window_days) % 31


def next_occurrence(today: date, target_day: int) -> date:
    """
    Next date on or after ``today`` whose day of month is ``target_day``.

    Days past the end of a short month land on that month's last day.
    """
    candidate = clamp_day(today.year, today.month, target_day)
    if candidate >= today:
        return candidate
    following = shift_months(today, 1)
    return clamp_day(following.year, following.month, target_day)


def calendar_days_until(today: date, target_day: int) -> int:
    """True calendar distance to the next ``target_day``"""
    return (next_occurrence(today, target_day) - today).days


def is_within_calendar_window(today: date, target_day: int, window_days: int = 7) -> bool:
    return calendar_days_until(today, target_day) <= window_days


def due_soon(today: date, target_day: int, window_days: int, calendar_mode: str) -> bool:
    """Reminder-window check in the configured calendar mode"""
    if calendar_mode == CALENDAR:
        return is_within_calendar_window(today, target_day, window_days)
    return is_within_window(today, target_day, window_days)


def distance_to(today: date, target_day: int, calendar_mode: str) -> int:
    if calendar_mode == CALENDAR:
        return calendar_days_until(today, target_day)
    return days_until(today.day, target_day)


def current_cycle(today: date, closing_day: int) -> tuple[date, date]:
    """
    Open billing cycle containing ``today``: the day after the previous
    closing date through the next closing date (both inclusive).
    """
    closing = next_occurrence(today, closing_day)
    previous_month = shift_months(closing, -1)
    previous_closing = clamp_day(previous_month.year, previous_month.month, closing_day)
    return previous_closing + timedelta(days=1), closing
