"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping the day to the month length (31 in February → 28/29)"""
    return date(year, month, min(day, days_in_month(year, month)))


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    return clamp_day(value.year, value.month, 31)


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping the day when the target month is shorter"""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    return clamp_day(year, month + 1, value.day)


def generate_month_range(start: date, count: int) -> List[date]:
    """First day of each of `count` consecutive months starting at `start`'s month"""
    first = month_start(start)
    return [add_months(first, i) for i in range(count)]


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)"""
    return (end - start).days


def next_day(value: date) -> date:
    return value + timedelta(days=1)
