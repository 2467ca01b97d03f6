"""
Payroll calculation service.

This module provides PayrollCalculationService, the entry point the HTTP
layer uses for shift costing and sick-leave summaries. It resolves defaults
from Django settings, times and logs each calculation, and delegates the
arithmetic to the pure engine modules.
"""

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from django.conf import settings

from core.exceptions import CalculationError
from core.logging_utils import err_tag, public_emp_id

from .batch import summarize_sick_leave_parallel
from .contracts import (
    ZERO,
    PayrollPeriod,
    Shift,
    ShiftCostBreakdown,
    SickLeavePayrollSummary,
    SickLeaveSpan,
    ValidationError,
    WageSupplementRule,
    to_decimal,
)
from .enums import PercentageAveraging
from .shift_cost import (
    aggregate_shift_costs_by_date,
    calculate_shift_cost,
    combine_breakdowns,
)
from .sick_leave import (
    EmployeeNames,
    sick_leave_hours,
    sick_leave_pay,
    summarize_sick_leave,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodCostResult:
    """Totals for a list of shifts plus the per-date view"""

    total: ShiftCostBreakdown
    by_date: Dict[Any, ShiftCostBreakdown]
    shift_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total.to_dict(),
            "by_date": [
                {"date": day.isoformat(), **breakdown.to_dict()}
                for day, breakdown in self.by_date.items()
            ],
            "shift_count": self.shift_count,
        }


@dataclass(frozen=True)
class SickLeavePayrollLine:
    """A sick-leave summary with the employer-paid hours and pay"""

    summary: SickLeavePayrollSummary
    payable_hours: Decimal
    payable_pay: Decimal
    hourly_rate: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data = self.summary.to_dict()
        data.update(
            {
                "payable_hours": self.payable_hours,
                "payable_pay": self.payable_pay,
                "hourly_rate": self.hourly_rate,
            }
        )
        return data


class PayrollCalculationService:
    """
    Orchestrates wage supplement and sick-leave calculations.

    Defaults come from settings unless passed explicitly:
    PAYROLL_DEFAULT_HOURLY_RATE, SICK_LEAVE_HOURS_PER_DAY,
    SICK_LEAVE_PERCENTAGE_AVERAGING and PAYROLL_BATCH_MAX_WORKERS.
    """

    def __init__(
        self,
        default_hourly_rate=None,
        hours_per_day=None,
        averaging: Optional[PercentageAveraging] = None,
        max_workers: Optional[int] = None,
    ):
        self.default_hourly_rate = self._setting_decimal(
            "PAYROLL_DEFAULT_HOURLY_RATE",
            default_hourly_rate,
            Decimal("250"),
        )
        self.hours_per_day = self._setting_decimal(
            "SICK_LEAVE_HOURS_PER_DAY",
            hours_per_day,
            Decimal("7.5"),
        )
        self.averaging = averaging or PercentageAveraging.from_string(
            getattr(settings, "SICK_LEAVE_PERCENTAGE_AVERAGING", "")
        )
        self.max_workers = (
            max_workers
            if max_workers is not None
            else getattr(settings, "PAYROLL_BATCH_MAX_WORKERS", None)
        )

    @staticmethod
    def _setting_decimal(name: str, explicit, fallback: Decimal) -> Decimal:
        raw = explicit if explicit is not None else getattr(settings, name, fallback)
        try:
            value = to_decimal(raw, name)
        except ValidationError as e:
            raise CalculationError(
                f"Invalid payroll configuration: {name}",
                code="CONFIGURATION_ERROR",
                details={"setting": name, "error": str(e)},
            )
        if value <= ZERO:
            raise CalculationError(
                f"Invalid payroll configuration: {name} must be positive",
                code="CONFIGURATION_ERROR",
                details={"setting": name},
            )
        return value

    def resolve_hourly_rate(self, hourly_rate=None) -> Decimal:
        """Caller-supplied rate, or the configured default"""
        if hourly_rate is None:
            return self.default_hourly_rate
        rate = to_decimal(hourly_rate, "hourly_rate")
        if rate < ZERO:
            raise ValidationError(f"hourly_rate cannot be negative, got {rate}")
        return rate

    def _timed(self, action: str, employee_id, extra: Dict[str, Any], func: Callable):
        """Run func, logging start, success with duration, or failure"""
        emp = public_emp_id(employee_id)
        logger.info(
            f"Starting {action} calculation",
            extra={"employee": emp, **extra, "action": f"{action}_start"},
        )
        start_time = time.time()
        try:
            result = func()
        except Exception as e:
            logger.error(
                f"{action} calculation failed",
                extra={
                    "employee": emp,
                    "err": err_tag(e),
                    "error_type": type(e).__name__,
                    "action": f"{action}_error",
                },
                exc_info=True,
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(
            f"{action} calculation completed",
            extra={
                "employee": emp,
                "duration_ms": duration_ms,
                "action": f"{action}_success",
            },
        )
        return result

    def calculate_shift(
        self,
        shift: Shift,
        rules: Sequence[WageSupplementRule],
        hourly_rate=None,
        employee_id=None,
    ) -> ShiftCostBreakdown:
        rate = self.resolve_hourly_rate(hourly_rate)
        return self._timed(
            "shift_cost",
            employee_id,
            {"shift_date": shift.date.isoformat(), "rule_count": len(rules)},
            lambda: calculate_shift_cost(shift, rate, rules),
        )

    def calculate_period(
        self,
        shifts: Sequence[Shift],
        rules: Sequence[WageSupplementRule],
        hourly_rate=None,
        employee_id=None,
    ) -> PeriodCostResult:
        """
        Cost a list of shifts.

        Returns:
            PeriodCostResult: Grand total plus totals per shift date
        """
        rate = self.resolve_hourly_rate(hourly_rate)

        def run() -> PeriodCostResult:
            by_date = aggregate_shift_costs_by_date(shifts, rate, rules)
            return PeriodCostResult(
                total=combine_breakdowns(by_date.values()),
                by_date=by_date,
                shift_count=len(shifts),
            )

        return self._timed(
            "period_cost",
            employee_id,
            {"shift_count": len(shifts), "rule_count": len(rules)},
            run,
        )

    def summarize_sick_leave(
        self,
        spans: Iterable[SickLeaveSpan],
        period: PayrollPeriod,
        employee_names: Optional[EmployeeNames] = None,
        parallel: Optional[bool] = None,
    ) -> List[SickLeavePayrollSummary]:
        """
        Per-employee summaries for the period.

        Args:
            parallel: Force the worker pool on or off. By default the pool is
                used when PAYROLL_BATCH_MAX_WORKERS is configured.
        """
        spans = list(spans)
        use_pool = self.max_workers is not None if parallel is None else parallel

        def run() -> List[SickLeavePayrollSummary]:
            if use_pool:
                return summarize_sick_leave_parallel(
                    spans,
                    period,
                    employee_names,
                    self.averaging,
                    max_workers=self.max_workers,
                )
            return summarize_sick_leave(spans, period, employee_names, self.averaging)

        return self._timed(
            "sick_leave_summary",
            None,
            {
                "span_count": len(spans),
                "period_start": period.start_date.isoformat(),
                "period_end": period.end_date.isoformat(),
                "averaging": str(self.averaging),
                "parallel": use_pool,
            },
            run,
        )

    def sick_leave_payroll(
        self,
        spans: Iterable[SickLeaveSpan],
        period: PayrollPeriod,
        employee_names: Optional[EmployeeNames] = None,
        hourly_rates: Optional[Mapping[str, Any]] = None,
        parallel: Optional[bool] = None,
    ) -> List[SickLeavePayrollLine]:
        """
        Summaries with employer-paid hours and pay.

        Hours are employer-period days times hours per day times the
        summary percentage; NAV days are never converted to pay here.
        Employees missing from hourly_rates get the default rate.
        """
        summaries = self.summarize_sick_leave(spans, period, employee_names, parallel)
        hourly_rates = hourly_rates or {}

        lines = []
        for summary in summaries:
            rate = self.resolve_hourly_rate(hourly_rates.get(summary.employee_id))
            percentage = summary.sick_leave_percentage
            lines.append(
                SickLeavePayrollLine(
                    summary=summary,
                    payable_hours=sick_leave_hours(
                        summary.employer_period_days, percentage, self.hours_per_day
                    ),
                    payable_pay=sick_leave_pay(
                        summary.employer_period_days,
                        rate,
                        percentage,
                        self.hours_per_day,
                    ),
                    hourly_rate=rate,
                )
            )
        return lines
