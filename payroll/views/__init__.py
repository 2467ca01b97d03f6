"""
Payroll views package.

Views are split into modules by functionality:
- calculation_views.py - Shift and period costing
- sick_leave_views.py - Sick-leave summaries
"""

from .calculation_views import period_cost, shift_cost
from .sick_leave_views import sick_leave_summary

__all__ = [
    "period_cost",
    "shift_cost",
    "sick_leave_summary",
]
