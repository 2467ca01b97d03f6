"""
Shift costing views for payroll module.

Contains endpoints for:
- Cost of a single shift
- Cost of all shifts in a period, with per-date totals
"""

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..serializers import PeriodCostRequestSerializer, ShiftCostRequestSerializer
from ..services.payroll_service import PayrollCalculationService

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def shift_cost(request):
    """
    Calculate base pay and wage supplements for one shift
    """
    serializer = ShiftCostRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    service = PayrollCalculationService()
    breakdown = service.calculate_shift(
        serializer.build_shift(),
        serializer.build_rules(),
        hourly_rate=serializer.validated_data.get("hourly_rate"),
        employee_id=serializer.validated_data.get("employee_id"),
    )
    return Response(breakdown.to_dict())


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def period_cost(request):
    """
    Calculate totals for every shift in a period
    """
    serializer = PeriodCostRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    shifts = serializer.build_shifts()
    service = PayrollCalculationService()
    result = service.calculate_period(
        shifts,
        serializer.build_rules(),
        hourly_rate=serializer.validated_data.get("hourly_rate"),
        employee_id=serializer.validated_data.get("employee_id"),
    )
    logger.debug(
        "Period cost calculated",
        extra={
            "shift_count": result.shift_count,
            "date_count": len(result.by_date),
            "action": "period_cost_response",
        },
    )
    return Response(result.to_dict())
