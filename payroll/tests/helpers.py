"""
Test utilities for payroll tests.

Builders with sensible defaults so each test only spells out the fields it
is about, plus a standard rule set resembling a typical Norwegian
collective agreement.
"""

from datetime import date
from decimal import Decimal

from payroll.services.contracts import (
    PayrollPeriod,
    Shift,
    SickLeaveSpan,
    WageSupplementRule,
)
from payroll.services.enums import AmountType, SupplementType

HOURLY_RATE = Decimal("250")
JANUARY_2024 = PayrollPeriod(date(2024, 1, 1), date(2024, 1, 31))

# 2024-01-06 is a Saturday, 2024-01-07 a Sunday
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)
MONDAY = date(2024, 1, 8)


def make_rule(
    supplement_type=SupplementType.NIGHT,
    amount="50",
    *,
    id=None,
    name=None,
    amount_type=AmountType.FIXED,
    time_start=None,
    time_end=None,
    priority=None,
    is_active=True,
    weekend_day=None,
):
    supplement_type = SupplementType(str(supplement_type))
    return WageSupplementRule(
        id=id or f"rule-{supplement_type.value}",
        name=name if name is not None else f"{supplement_type.value} supplement",
        supplement_type=supplement_type,
        amount=Decimal(amount),
        amount_type=amount_type,
        time_start=time_start,
        time_end=time_end,
        priority=priority,
        is_active=is_active,
        weekend_day=weekend_day,
    )


def night_rule(amount="50", time_start="23:00", time_end="06:00", **kwargs):
    return make_rule(
        SupplementType.NIGHT, amount, time_start=time_start, time_end=time_end, **kwargs
    )


def evening_rule(amount="30", time_start="18:00", time_end="23:00", **kwargs):
    return make_rule(
        SupplementType.EVENING,
        amount,
        time_start=time_start,
        time_end=time_end,
        **kwargs,
    )


def make_shift(
    start="08:00",
    end="16:00",
    *,
    day=MONDAY,
    break_minutes=0,
    is_weekend=False,
    is_holiday=False,
    id=None,
):
    return Shift(
        date=day,
        start=start,
        end=end,
        break_minutes=break_minutes,
        is_weekend=is_weekend,
        is_holiday=is_holiday,
        id=id,
    )


def make_span(
    start_date="2024-01-01",
    end_date=None,
    *,
    id="sl-1",
    employee_id="emp-1",
    expected_return_date=None,
    actual_return_date=None,
    percentage="100",
    employer_period_completed=False,
    nav_takeover_date=None,
    status="active",
    leave_type="egenmelding",
):
    return SickLeaveSpan(
        id=id,
        employee_id=employee_id,
        start_date=start_date,
        end_date=end_date,
        expected_return_date=expected_return_date,
        actual_return_date=actual_return_date,
        percentage=Decimal(percentage),
        employer_period_completed=employer_period_completed,
        nav_takeover_date=nav_takeover_date,
        status=status,
        leave_type=leave_type,
    )


def standard_rules():
    """Night, evening, Saturday, Sunday and a 100 % holiday rule"""
    return [
        night_rule(priority=1),
        evening_rule(priority=2),
        make_rule(
            SupplementType.WEEKEND,
            "40",
            id="rule-saturday",
            name="Lørdagstillegg",
            priority=3,
        ),
        make_rule(
            SupplementType.WEEKEND,
            "60",
            id="rule-sunday",
            name="Søndagstillegg",
            priority=4,
        ),
        make_rule(
            SupplementType.HOLIDAY,
            "100",
            amount_type=AmountType.PERCENTAGE,
            priority=5,
        ),
    ]
