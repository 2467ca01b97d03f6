"""
Sick-leave apportionment for payroll periods.

A sick-leave span is clipped to the payroll period and its days are split
between the employer period (salary continues to be paid by the employer)
and the NAV period (national insurance takes over compensation). Per
employee the fragments are folded into a SickLeavePayrollSummary; payable
hours and pay are derived from the employer days only.
"""

from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import (
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .contracts import (
    HUNDRED,
    ZERO,
    PayrollPeriod,
    SickLeaveApportionment,
    SickLeaveFragment,
    SickLeavePayrollSummary,
    SickLeaveSpan,
    to_decimal,
)
from .enums import PercentageAveraging

DEFAULT_HOURS_PER_DAY = Decimal("7.5")
UNKNOWN_EMPLOYEE_NAME = "Ukjent"

T = TypeVar("T")

EmployeeNames = Union[Mapping[str, str], Callable[[str], Optional[str]]]


def first_present(*candidates: Optional[T]) -> Optional[T]:
    """First candidate that is not None"""
    return next((value for value in candidates if value is not None), None)


def resolve_span_end_date(span: SickLeaveSpan, period_end: date) -> date:
    """
    Logical last day of a span.

    Precedence: actual return date, declared end date, expected return date.
    A span with none of them is still open and runs to the period end.
    """
    return first_present(
        span.actual_return_date,
        span.end_date,
        span.expected_return_date,
        period_end,
    )


def _split_employer_nav(
    span: SickLeaveSpan, effective_start: date, effective_end: date, total_days: int
) -> Tuple[int, int]:
    takeover = span.nav_takeover_date
    if takeover is not None:
        if takeover > effective_end:
            return total_days, 0
        if takeover <= effective_start:
            return 0, total_days
        employer_days = (takeover - effective_start).days
        return employer_days, total_days - employer_days

    if span.employer_period_completed:
        return 0, total_days
    return total_days, 0


def apportion_sick_leave(
    span: SickLeaveSpan, period: PayrollPeriod
) -> SickLeaveApportionment:
    """
    Clip a span to a payroll period and split it at the NAV takeover.

    Day counts are inclusive of both effective dates. A span that does not
    reach into the period yields zero days.
    """
    span_end = resolve_span_end_date(span, period.end_date)
    effective_start = max(span.start_date, period.start_date)
    effective_end = min(span_end, period.end_date)

    if effective_start > effective_end:
        return SickLeaveApportionment(
            total_days=0,
            employer_days=0,
            nav_days=0,
            effective_start=effective_start,
            effective_end=effective_end,
        )

    total_days = (effective_end - effective_start).days + 1
    employer_days, nav_days = _split_employer_nav(
        span, effective_start, effective_end, total_days
    )
    return SickLeaveApportionment(
        total_days=total_days,
        employer_days=employer_days,
        nav_days=nav_days,
        effective_start=effective_start,
        effective_end=effective_end,
    )


def make_fragment(
    span: SickLeaveSpan, apportionment: SickLeaveApportionment
) -> SickLeaveFragment:
    return SickLeaveFragment(
        span_id=span.id,
        start_date=apportionment.effective_start,
        end_date=apportionment.effective_end,
        leave_type=span.leave_type,
        days_in_period=apportionment.total_days,
        employer_days=apportionment.employer_days,
        nav_days=apportionment.nav_days,
        percentage=span.percentage,
        # Flag reflects the span as registered, not the split at the takeover
        is_employer_period=not span.employer_period_completed,
    )


def _round_percentage(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def next_average_percentage(
    current: Decimal,
    count_before: int,
    percentage: Decimal,
    averaging: PercentageAveraging = PercentageAveraging.LEGACY,
) -> Decimal:
    """
    Running percentage after one more fragment.

    Args:
        current: Average over the fragments folded so far
        count_before: Number of fragments folded so far
        percentage: Percentage of the incoming fragment
        averaging: Policy, see PercentageAveraging

    Returns:
        Decimal: The updated average. The first fragment's percentage is
        taken as is; later updates are rounded half up to whole percent.
    """
    if count_before == 0:
        return percentage
    if averaging is PercentageAveraging.LEGACY and percentage == HUNDRED:
        return current
    count = count_before + 1
    return _round_percentage((current * count_before + percentage) / count)


@dataclass(frozen=True)
class EmployeeFold:
    total_days: int = 0
    employer_days: int = 0
    nav_days: int = 0
    percentage: Decimal = ZERO
    fragments: Tuple[SickLeaveFragment, ...] = ()


def fold_fragments(
    fragments: Iterable[SickLeaveFragment],
    averaging: PercentageAveraging = PercentageAveraging.LEGACY,
) -> EmployeeFold:
    """
    Fold one employee's fragments in input order.

    The running percentage is order sensitive, so callers must pass the
    fragments in the order the spans were supplied. No fragments gives an
    all-zero result with percentage 0.
    """

    def step(acc: EmployeeFold, fragment: SickLeaveFragment) -> EmployeeFold:
        return replace(
            acc,
            total_days=acc.total_days + fragment.days_in_period,
            employer_days=acc.employer_days + fragment.employer_days,
            nav_days=acc.nav_days + fragment.nav_days,
            percentage=next_average_percentage(
                acc.percentage, len(acc.fragments), fragment.percentage, averaging
            ),
            fragments=acc.fragments + (fragment,),
        )

    return reduce(step, fragments, EmployeeFold())


def lookup_employee_name(
    employee_names: Optional[EmployeeNames], employee_id: str
) -> str:
    if employee_names is None:
        return UNKNOWN_EMPLOYEE_NAME
    if callable(employee_names):
        name = employee_names(employee_id)
    else:
        name = employee_names.get(employee_id)
    return name or UNKNOWN_EMPLOYEE_NAME


def collect_fragments(
    spans: Iterable[SickLeaveSpan], period: PayrollPeriod
) -> Dict[str, List[SickLeaveFragment]]:
    """
    Contributing fragments grouped by employee.

    Employees appear in order of their first contributing span, fragments in
    span input order. Cancelled spans and spans without days in the period
    are left out. Overlapping spans are not merged.
    """
    grouped: Dict[str, List[SickLeaveFragment]] = {}
    for span in spans:
        if not span.status.counts_for_payroll:
            continue
        apportionment = apportion_sick_leave(span, period)
        if not apportionment.contributes:
            continue
        grouped.setdefault(span.employee_id, []).append(
            make_fragment(span, apportionment)
        )
    return grouped


def summarize_employee(
    employee_id: str,
    employee_name: str,
    fragments: Iterable[SickLeaveFragment],
    averaging: PercentageAveraging = PercentageAveraging.LEGACY,
) -> SickLeavePayrollSummary:
    folded = fold_fragments(fragments, averaging)
    return SickLeavePayrollSummary(
        employee_id=employee_id,
        employee_name=employee_name,
        total_sick_days=folded.total_days,
        employer_period_days=folded.employer_days,
        nav_period_days=folded.nav_days,
        sick_leave_percentage=folded.percentage,
        fragments=folded.fragments,
    )


def summarize_sick_leave(
    spans: Iterable[SickLeaveSpan],
    period: PayrollPeriod,
    employee_names: Optional[EmployeeNames] = None,
    averaging: PercentageAveraging = PercentageAveraging.LEGACY,
) -> List[SickLeavePayrollSummary]:
    """
    Per-employee sick-leave summaries for a payroll period.

    Args:
        spans: Sick-leave spans in the order the absence store returned them
        period: Inclusive reporting window
        employee_names: Mapping or callable resolving employee id to name
        averaging: Running percentage policy

    Returns:
        List[SickLeavePayrollSummary]: Only employees with at least one
        contributing fragment, in order of first appearance
    """
    grouped = collect_fragments(spans, period)
    return [
        summarize_employee(
            employee_id,
            lookup_employee_name(employee_names, employee_id),
            fragments,
            averaging,
        )
        for employee_id, fragments in grouped.items()
    ]


def sick_leave_hours(
    total_sick_days: int,
    sick_leave_percentage=HUNDRED,
    hours_per_day=DEFAULT_HOURS_PER_DAY,
) -> Decimal:
    """Sick hours for a number of days at a sick-leave percentage"""
    percentage = to_decimal(sick_leave_percentage, "sick_leave_percentage")
    per_day = to_decimal(hours_per_day, "hours_per_day")
    return Decimal(total_sick_days) * per_day * (percentage / HUNDRED)


def sick_leave_pay(
    employer_period_days: int,
    hourly_rate,
    sick_leave_percentage=HUNDRED,
    hours_per_day=DEFAULT_HOURS_PER_DAY,
) -> Decimal:
    """
    Employer-paid sick pay.

    Only employer-period days are paid here; NAV days are disbursed by NAV.
    """
    hours = sick_leave_hours(employer_period_days, sick_leave_percentage, hours_per_day)
    return hours * to_decimal(hourly_rate, "hourly_rate")
