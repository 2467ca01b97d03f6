"""
Shift cost calculation and aggregation.

calculate_shift_cost turns one shift into a ShiftCostBreakdown; the
aggregators fold many breakdowns into period or per-date totals.
"""

from decimal import Decimal
from functools import reduce
from typing import Dict, Iterable, Optional, Sequence

from .contracts import Shift, ShiftCostBreakdown, WageSupplementRule, to_decimal
from .enums import SupplementType
from .supplement_resolver import active_rules_by_priority, resolve_supplements
from .time_overlap import MINUTES_PER_HOUR


def calculate_shift_cost(
    shift: Shift,
    hourly_rate,
    rules: Iterable[WageSupplementRule],
) -> ShiftCostBreakdown:
    """
    Calculate base pay and wage supplements for one shift.

    Args:
        shift: Validated shift record
        hourly_rate: Base hourly rate for the employee (Decimal or number)
        rules: Supplement rules; inactive ones are ignored

    Returns:
        ShiftCostBreakdown: Every component plus the exact total
    """
    rate = to_decimal(hourly_rate, "hourly_rate")
    ordered_rules = active_rules_by_priority(rules)

    base_hours = Decimal(shift.duration_minutes - shift.break_minutes) / MINUTES_PER_HOUR
    base_cost = base_hours * rate

    lines = resolve_supplements(shift, ordered_rules, base_hours, base_cost)

    return ShiftCostBreakdown(
        base_hours=base_hours,
        base_cost=base_cost,
        night_hours=lines[SupplementType.NIGHT].hours,
        night_supplement=lines[SupplementType.NIGHT].cost,
        evening_hours=lines[SupplementType.EVENING].hours,
        evening_supplement=lines[SupplementType.EVENING].cost,
        weekend_supplement=lines[SupplementType.WEEKEND].cost,
        holiday_supplement=lines[SupplementType.HOLIDAY].cost,
    )


def aggregate_shift_costs(
    shifts: Iterable[Shift],
    hourly_rate,
    rules: Sequence[WageSupplementRule],
) -> ShiftCostBreakdown:
    """
    Total cost of a sequence of shifts, folded in input order.

    The empty sequence yields ShiftCostBreakdown.zero().
    """
    rules = tuple(rules)
    return reduce(
        lambda total, shift: total + calculate_shift_cost(shift, hourly_rate, rules),
        shifts,
        ShiftCostBreakdown.zero(),
    )


def aggregate_shift_costs_by_date(
    shifts: Iterable[Shift],
    hourly_rate,
    rules: Sequence[WageSupplementRule],
) -> Dict:
    """
    Per-date totals, keyed by shift date in order of first appearance.

    An overnight shift counts towards the date it starts on.
    """
    rules = tuple(rules)
    totals: Dict = {}
    for shift in shifts:
        cost = calculate_shift_cost(shift, hourly_rate, rules)
        totals[shift.date] = totals.get(shift.date, ShiftCostBreakdown.zero()) + cost
    return totals


def combine_breakdowns(
    breakdowns: Iterable[ShiftCostBreakdown],
    initial: Optional[ShiftCostBreakdown] = None,
) -> ShiftCostBreakdown:
    """Sum already computed breakdowns, e.g. per-date totals into a period"""
    return reduce(
        lambda total, item: total + item,
        breakdowns,
        initial if initial is not None else ShiftCostBreakdown.zero(),
    )
