"""Occurrence rules for recurring expected transactions"""

from datetime import date, timedelta
from typing import Optional

from finansix_ledger.domain.models import ExpectedTransaction, RecurrenceType
from finansix_ledger.utils.date_utils import add_months, clamp_day


def _sunday_based_weekday(value: date) -> int:
    # date.weekday() is Monday=0; stored patterns use Sunday=0
    return (value.weekday() + 1) % 7


def _first_weekday_on_or_after(value: date, day_of_week: int) -> date:
    offset = (day_of_week - _sunday_based_weekday(value)) % 7
    return value + timedelta(days=offset)


def _next_weekly(expected: ExpectedTransaction, on_or_after: date, step_days: int) -> date:
    day_of_week = expected.day_of_week
    if day_of_week is None:
        day_of_week = _sunday_based_weekday(expected.start_date)
    anchor = _first_weekday_on_or_after(expected.start_date, day_of_week)
    if on_or_after <= anchor:
        return anchor
    periods = -(-(on_or_after - anchor).days // step_days)  # ceiling division
    return anchor + timedelta(days=periods * step_days)


def _next_monthly(expected: ExpectedTransaction, on_or_after: date) -> date:
    day = expected.day_of_month or expected.start_date.day
    candidate = clamp_day(on_or_after.year, on_or_after.month, day)
    if candidate < on_or_after:
        following = add_months(on_or_after.replace(day=1), 1)
        candidate = clamp_day(following.year, following.month, day)
    return candidate


def _next_yearly(expected: ExpectedTransaction, on_or_after: date) -> date:
    start = expected.start_date
    candidate = clamp_day(on_or_after.year, start.month, start.day)
    if candidate < on_or_after:
        candidate = clamp_day(on_or_after.year + 1, start.month, start.day)
    return candidate


def next_occurrence(expected: ExpectedTransaction, on_or_after: date) -> Optional[date]:
    """
    First date on or after `on_or_after` when the expected transaction fires.

    Returns None once the recurrence has ended.
    """
    since = max(on_or_after, expected.start_date)

    if expected.recurrence_type == RecurrenceType.DAILY:
        occurrence = since
    elif expected.recurrence_type == RecurrenceType.WEEKLY:
        occurrence = _next_weekly(expected, since, 7)
    elif expected.recurrence_type == RecurrenceType.BIWEEKLY:
        occurrence = _next_weekly(expected, since, 14)
    elif expected.recurrence_type == RecurrenceType.MONTHLY:
        occurrence = _next_monthly(expected, since)
    else:
        occurrence = _next_yearly(expected, since)

    if expected.end_date is not None and occurrence > expected.end_date:
        return None
    return occurrence


def occurs_between(expected: ExpectedTransaction, start: date, end: date) -> bool:
    """Whether the expected transaction fires at least once in [start, end]"""
    if not expected.is_active:
        return False
    occurrence = next_occurrence(expected, start)
    return occurrence is not None and occurrence <= end
