"""Unit tests for recurring expected transactions"""

import pytest
from datetime import date
from finansix_ledger.domain.models import ExpectedTransaction, RecurrenceType, TransactionType
from finansix_ledger.domain.recurrence import next_occurrence, occurs_between


def _expected(recurrence_type, start_date, **overrides):
    fields = dict(
        id="exp_1",
        household_id="household_1",
        description="Salary",
        type=TransactionType.INCOME,
        amount_cents=500000,
        recurrence_type=recurrence_type,
        start_date=start_date,
    )
    fields.update(overrides)
    return ExpectedTransaction(**fields)


def test_daily():
    """Test daily recurrence fires on the requested day"""
    exp = _expected(RecurrenceType.DAILY, date(2024, 3, 1))
    assert next_occurrence(exp, date(2024, 3, 10)) == date(2024, 3, 10)


def test_before_start_date():
    """Test nothing fires before the start date"""
    exp = _expected(RecurrenceType.MONTHLY, date(2024, 6, 15))
    assert next_occurrence(exp, date(2024, 3, 1)) == date(2024, 6, 15)


def test_after_end_date():
    """Test recurrence stops after its end date"""
    exp = _expected(RecurrenceType.DAILY, date(2024, 3, 1), end_date=date(2024, 3, 5))
    assert next_occurrence(exp, date(2024, 3, 6)) is None


def test_weekly_on_given_weekday():
    """Test day_of_week uses Sunday as 0"""
    # 2024-03-01 is a Friday; 1 = Monday
    exp = _expected(RecurrenceType.WEEKLY, date(2024, 3, 1), day_of_week=1)

    assert next_occurrence(exp, date(2024, 3, 1)) == date(2024, 3, 4)
    assert next_occurrence(exp, date(2024, 3, 5)) == date(2024, 3, 11)


def test_weekly_without_weekday_uses_start():
    """Test weekly recurrence anchored on the start date"""
    exp = _expected(RecurrenceType.WEEKLY, date(2024, 3, 1))
    assert next_occurrence(exp, date(2024, 3, 2)) == date(2024, 3, 8)


def test_biweekly():
    """Test every other week from the anchor"""
    exp = _expected(RecurrenceType.BIWEEKLY, date(2024, 3, 4), day_of_week=1)

    assert next_occurrence(exp, date(2024, 3, 5)) == date(2024, 3, 18)
    assert next_occurrence(exp, date(2024, 3, 18)) == date(2024, 3, 18)


def test_monthly_clamps_day():
    """Test day_of_month 31 fires on the last day of short months"""
    exp = _expected(RecurrenceType.MONTHLY, date(2024, 1, 1), day_of_month=31)

    assert next_occurrence(exp, date(2024, 2, 1)) == date(2024, 2, 29)
    assert next_occurrence(exp, date(2024, 4, 1)) == date(2024, 4, 30)


def test_monthly_rolls_to_next_month():
    """Test a day already passed this month fires next month"""
    exp = _expected(RecurrenceType.MONTHLY, date(2024, 1, 1), day_of_month=5)
    assert next_occurrence(exp, date(2024, 2, 10)) == date(2024, 3, 5)


def test_yearly_leap_day():
    """Test a Feb 29 anniversary falls on Feb 28 in common years"""
    exp = _expected(RecurrenceType.YEARLY, date(2020, 2, 29))

    assert next_occurrence(exp, date(2023, 1, 1)) == date(2023, 2, 28)
    assert next_occurrence(exp, date(2023, 3, 1)) == date(2024, 2, 29)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2024, 3, 1), date(2024, 3, 31), True),
        (date(2024, 3, 6), date(2024, 3, 31), False),
    ],
)
def test_occurs_between(start, end, expected):
    """Test occurrence inside a date range"""
    exp = _expected(RecurrenceType.MONTHLY, date(2024, 1, 1), day_of_month=5, end_date=date(2024, 3, 31))
    assert occurs_between(exp, start, end) is expected


def test_inactive_never_occurs():
    """Test inactive expected transactions are ignored"""
    exp = _expected(RecurrenceType.DAILY, date(2024, 1, 1), is_active=False)
    assert occurs_between(exp, date(2024, 3, 1), date(2024, 3, 31)) is False
