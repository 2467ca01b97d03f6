"""
Parallel per-employee sick-leave summaries for batch payroll runs.

Employees are independent of each other, so their folds can run in a
worker pool. Within one employee the fragments are still folded in input
order. Results come back in the same order as summarize_sick_leave.
"""

import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from core.logging_utils import err_tag, mask_name, public_emp_id

from .contracts import PayrollPeriod, SickLeaveFragment, SickLeavePayrollSummary, SickLeaveSpan
from .enums import PercentageAveraging
from .sick_leave import (
    EmployeeNames,
    collect_fragments,
    lookup_employee_name,
    summarize_employee,
)

logger = logging.getLogger(__name__)

EmployeeTask = Tuple[str, str, Tuple[SickLeaveFragment, ...], PercentageAveraging]


def _summarize_worker(task: EmployeeTask) -> SickLeavePayrollSummary:
    """
    Worker function for one employee.

    Module level so it can be pickled for process pools.
    """
    employee_id, employee_name, fragments, averaging = task
    try:
        return summarize_employee(employee_id, employee_name, fragments, averaging)
    except Exception as e:
        logger.error(
            f"Sick-leave summary failed for {public_emp_id(employee_id)}",
            extra={
                "employee": public_emp_id(employee_id),
                "employee_initials": mask_name(employee_name),
                "err": err_tag(e),
                "error_type": type(e).__name__,
                "action": "sick_leave_worker_error",
            },
            exc_info=True,
        )
        raise


class SickLeaveBatchExecutor:
    """
    Runs per-employee sick-leave folds in a thread or process pool.

    Threads are the default; the work is small per employee and threads
    avoid pickling the records. Use processes for very large runs.
    """

    def __init__(self, max_workers: Optional[int] = None, use_processes: bool = False):
        """
        Args:
            max_workers: Maximum number of workers (None = auto-detect)
            use_processes: Use processes (True) or threads (False)
        """
        self.max_workers = max_workers or self._get_optimal_worker_count()
        self.use_processes = use_processes

    @staticmethod
    def _get_optimal_worker_count() -> int:
        return max(1, min(8, (os.cpu_count() or 1)))

    def _create_executor(self):
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    def summarize(
        self,
        spans: Iterable[SickLeaveSpan],
        period: PayrollPeriod,
        employee_names: Optional[EmployeeNames] = None,
        averaging: PercentageAveraging = PercentageAveraging.LEGACY,
    ) -> List[SickLeavePayrollSummary]:
        """Parallel equivalent of sick_leave.summarize_sick_leave"""
        grouped = collect_fragments(spans, period)
        tasks: Sequence[EmployeeTask] = [
            (
                employee_id,
                lookup_employee_name(employee_names, employee_id),
                tuple(fragments),
                averaging,
            )
            for employee_id, fragments in grouped.items()
        ]
        if not tasks:
            return []

        logger.info(
            f"Summarizing sick leave for {len(tasks)} employees",
            extra={
                "employee_count": len(tasks),
                "max_workers": self.max_workers,
                "use_processes": self.use_processes,
                "period_start": period.start_date.isoformat(),
                "period_end": period.end_date.isoformat(),
                "action": "sick_leave_batch_start",
            },
        )

        with self._create_executor() as executor:
            # map() keeps task order, which is first-appearance order
            return list(executor.map(_summarize_worker, tasks))


def summarize_sick_leave_parallel(
    spans: Iterable[SickLeaveSpan],
    period: PayrollPeriod,
    employee_names: Optional[EmployeeNames] = None,
    averaging: PercentageAveraging = PercentageAveraging.LEGACY,
    max_workers: Optional[int] = None,
    use_processes: bool = False,
) -> List[SickLeavePayrollSummary]:
    executor = SickLeaveBatchExecutor(max_workers=max_workers, use_processes=use_processes)
    return executor.summarize(spans, period, employee_names, averaging)
