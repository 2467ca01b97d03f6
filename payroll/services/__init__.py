# Payroll services package

from .batch import summarize_sick_leave_parallel
from .payroll_service import PayrollCalculationService
from .shift_cost import aggregate_shift_costs, calculate_shift_cost
from .sick_leave import summarize_sick_leave

__all__ = [
    "PayrollCalculationService",
    "aggregate_shift_costs",
    "calculate_shift_cost",
    "summarize_sick_leave",
    "summarize_sick_leave_parallel",
]
