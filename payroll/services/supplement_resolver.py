"""
Resolution of wage supplement rules for a single shift.

Given the administrator's rule set and one shift, decide which rule applies
for each supplement category and how many hours and how much money it adds.
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from .contracts import HUNDRED, Shift, SupplementLine, WageSupplementRule
from .enums import AmountType, SupplementType, WeekendDay
from .time_overlap import overlap_hours


def active_rules_by_priority(
    rules: Iterable[WageSupplementRule],
) -> List[WageSupplementRule]:
    """
    Active rules ordered by priority, lowest first.

    The sort is stable, so rules sharing a priority keep their input order.
    Rules without a priority go last, as they do in the settings store.
    """
    active = [rule for rule in rules if rule.is_active]
    return sorted(
        active,
        key=lambda rule: (rule.priority is None, rule.priority or 0),
    )


def first_rule_of_type(
    rules: Sequence[WageSupplementRule], supplement_type: SupplementType
) -> Optional[WageSupplementRule]:
    return next(
        (rule for rule in rules if rule.supplement_type is supplement_type), None
    )


def select_weekend_rule(
    rules: Sequence[WageSupplementRule], shift_day: WeekendDay
) -> Optional[WageSupplementRule]:
    """
    Pick the weekend rule for a shift's weekday.

    The first weekend rule dedicated to that day wins. Without one, the
    first weekend rule in list order applies, whatever day it names.
    """
    weekend_rules = [
        rule for rule in rules if rule.supplement_type is SupplementType.WEEKEND
    ]
    if not weekend_rules:
        return None

    if shift_day is not WeekendDay.ANY:
        for rule in weekend_rules:
            if rule.weekend_day is shift_day:
                return rule

    return weekend_rules[0]


def _time_bounded_line(
    shift: Shift, rule: Optional[WageSupplementRule]
) -> SupplementLine:
    if rule is None or not rule.has_time_window:
        return SupplementLine()

    hours = overlap_hours(shift.start, shift.end, rule.time_start, rule.time_end)
    # Night and evening amounts are hourly rates whatever the amount type says
    return SupplementLine(hours=hours, cost=hours * rule.amount, rule_id=rule.id)


def _holiday_cost(
    rule: WageSupplementRule, base_hours: Decimal, base_cost: Decimal
) -> Decimal:
    if rule.amount_type is AmountType.PERCENTAGE:
        return base_cost * (rule.amount / HUNDRED)
    return base_hours * rule.amount


def resolve_supplements(
    shift: Shift,
    rules: Sequence[WageSupplementRule],
    base_hours: Decimal,
    base_cost: Decimal,
) -> Dict[SupplementType, SupplementLine]:
    """
    Resolve every supplement category for one shift.

    Args:
        shift: The shift being costed
        rules: Active rules, already ordered by priority
        base_hours: Paid hours of the shift (break deducted)
        base_cost: base_hours times the hourly rate

    Returns:
        Dict[SupplementType, SupplementLine]: One entry per category; a
        category without a matching rule has zero hours and cost
    """
    lines = {
        SupplementType.NIGHT: _time_bounded_line(
            shift, first_rule_of_type(rules, SupplementType.NIGHT)
        ),
        SupplementType.EVENING: _time_bounded_line(
            shift, first_rule_of_type(rules, SupplementType.EVENING)
        ),
        SupplementType.WEEKEND: SupplementLine(),
        SupplementType.HOLIDAY: SupplementLine(),
    }

    if shift.is_weekend:
        weekend_rule = select_weekend_rule(rules, WeekendDay.for_date(shift.date))
        if weekend_rule is not None:
            lines[SupplementType.WEEKEND] = SupplementLine(
                hours=base_hours,
                cost=base_hours * weekend_rule.amount,
                rule_id=weekend_rule.id,
            )

    if shift.is_holiday:
        holiday_rule = first_rule_of_type(rules, SupplementType.HOLIDAY)
        if holiday_rule is not None:
            lines[SupplementType.HOLIDAY] = SupplementLine(
                hours=base_hours,
                cost=_holiday_cost(holiday_rule, base_hours, base_cost),
                rule_id=holiday_rule.id,
            )

    return lines
