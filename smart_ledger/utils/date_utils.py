"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def month_key(day: date) -> str:
    """YYYY-MM prefix of an ISO date"""
    return day.isoformat()[:7]


def shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month"""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def clamp_day(year: int, month: int, day_of_month: int) -> date:
    """Date for day_of_month in the given month, pulled back to the month's last day if needed"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, max(1, min(day_of_month, last_day)))


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of ``day``'s month"""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)
