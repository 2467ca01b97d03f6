from decimal import Decimal

from rest_framework import serializers

from .services.contracts import (
    PayrollPeriod,
    Shift,
    SickLeaveSpan,
    ValidationError as CalculationValidationError,
    WageSupplementRule,
)
from .services.enums import AmountType, SickLeaveStatus, SupplementType, WeekendDay
from .services.time_overlap import parse_time_to_minutes


def _choices(enum_cls):
    return [(member.value, member.value) for member in enum_cls]


def _validate_time(value):
    if value in (None, ""):
        return None
    try:
        parse_time_to_minutes(value)
    except CalculationValidationError as e:
        raise serializers.ValidationError(str(e))
    return value


class WageSupplementRuleSerializer(serializers.Serializer):
    """Wage supplement rule as configured by an administrator"""

    id = serializers.CharField()
    name = serializers.CharField(allow_blank=True, default="")
    supplement_type = serializers.ChoiceField(choices=_choices(SupplementType))
    amount = serializers.DecimalField(max_digits=12, decimal_places=4, min_value=0)
    amount_type = serializers.ChoiceField(
        choices=_choices(AmountType), default=AmountType.FIXED.value
    )
    time_start = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    time_end = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    priority = serializers.IntegerField(required=False, allow_null=True)
    is_active = serializers.BooleanField(default=True)
    weekend_day = serializers.ChoiceField(
        choices=_choices(WeekendDay), required=False, allow_null=True
    )
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_time_start(self, value):
        return _validate_time(value)

    def validate_time_end(self, value):
        return _validate_time(value)

    def validate(self, attrs):
        """Time-bounded rules need both ends of the window"""
        supplement_type = SupplementType(attrs["supplement_type"])
        has_start = bool(attrs.get("time_start"))
        has_end = bool(attrs.get("time_end"))
        if has_start != has_end:
            raise serializers.ValidationError(
                {"time_end": "time_start and time_end must be given together"}
            )
        if supplement_type.is_time_bounded and not has_start:
            raise serializers.ValidationError(
                {"time_start": f"{supplement_type} rules need a time window"}
            )
        return attrs


class ShiftSerializer(serializers.Serializer):
    """One planned shift; end before start means the shift runs overnight"""

    id = serializers.CharField(required=False, allow_null=True)
    date = serializers.DateField()
    start = serializers.CharField()
    end = serializers.CharField()
    break_minutes = serializers.IntegerField(min_value=0, default=0)
    is_weekend = serializers.BooleanField(default=False)
    is_holiday = serializers.BooleanField(default=False)

    def validate_start(self, value):
        return _validate_time(value)

    def validate_end(self, value):
        return _validate_time(value)

    def validate(self, attrs):
        try:
            Shift(**attrs)
        except CalculationValidationError as e:
            raise serializers.ValidationError(str(e))
        return attrs


class PayrollPeriodSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs["start_date"] > attrs["end_date"]:
            raise serializers.ValidationError(
                {"end_date": "Period end date must not be before start date"}
            )
        return attrs


class SickLeaveSpanSerializer(serializers.Serializer):
    """A registered sick leave from the absence store"""

    id = serializers.CharField()
    employee_id = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    expected_return_date = serializers.DateField(required=False, allow_null=True)
    actual_return_date = serializers.DateField(required=False, allow_null=True)
    percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=100,
        default=Decimal("100"),
    )
    employer_period_completed = serializers.BooleanField(default=False)
    nav_takeover_date = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(
        choices=_choices(SickLeaveStatus), default=SickLeaveStatus.ACTIVE.value
    )
    leave_type = serializers.CharField(required=False, allow_blank=True, default="")


class ShiftCostRequestSerializer(serializers.Serializer):
    """Request body for costing a single shift"""

    shift = ShiftSerializer()
    rules = WageSupplementRuleSerializer(many=True, required=False)
    hourly_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    employee_id = serializers.CharField(required=False, allow_null=True)

    def build_shift(self) -> Shift:
        return Shift(**self.validated_data["shift"])

    def build_rules(self):
        return [
            WageSupplementRule(**rule) for rule in self.validated_data.get("rules", [])
        ]


class PeriodCostRequestSerializer(serializers.Serializer):
    """Request body for costing all shifts of a period"""

    shifts = ShiftSerializer(many=True)
    rules = WageSupplementRuleSerializer(many=True, required=False)
    hourly_rate = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    employee_id = serializers.CharField(required=False, allow_null=True)

    def build_shifts(self):
        return [Shift(**shift) for shift in self.validated_data["shifts"]]

    def build_rules(self):
        return [
            WageSupplementRule(**rule) for rule in self.validated_data.get("rules", [])
        ]


class SickLeaveSummaryRequestSerializer(serializers.Serializer):
    """Request body for the per-employee sick-leave summary"""

    period = PayrollPeriodSerializer()
    spans = SickLeaveSpanSerializer(many=True)
    employee_names = serializers.DictField(
        child=serializers.CharField(allow_blank=True), required=False
    )
    hourly_rates = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0),
        required=False,
    )

    def build_period(self) -> PayrollPeriod:
        return PayrollPeriod(**self.validated_data["period"])

    def build_spans(self):
        return [SickLeaveSpan(**span) for span in self.validated_data["spans"]]
