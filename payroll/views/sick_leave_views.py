"""
Sick-leave payroll views.

The absence store supplies the spans; this endpoint clips them to the
payroll period and reports employer and NAV days per employee together
with the employer-paid hours and pay.
"""

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..serializers import SickLeaveSummaryRequestSerializer
from ..services.payroll_service import PayrollCalculationService

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def sick_leave_summary(request):
    """
    Per-employee sick-leave summary for a payroll period
    """
    serializer = SickLeaveSummaryRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    period = serializer.build_period()
    service = PayrollCalculationService()
    lines = service.sick_leave_payroll(
        serializer.build_spans(),
        period,
        employee_names=serializer.validated_data.get("employee_names"),
        hourly_rates=serializer.validated_data.get("hourly_rates"),
    )

    return Response(
        {
            "period": {
                "start_date": period.start_date.isoformat(),
                "end_date": period.end_date.isoformat(),
            },
            "averaging": str(service.averaging),
            "employees": [line.to_dict() for line in lines],
        }
    )
