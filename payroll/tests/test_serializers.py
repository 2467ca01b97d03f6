"""
Tests for payroll request serializers.
"""

from datetime import date
from decimal import Decimal

from payroll.serializers import (
    PeriodCostRequestSerializer,
    ShiftCostRequestSerializer,
    ShiftSerializer,
    SickLeaveSummaryRequestSerializer,
    WageSupplementRuleSerializer,
)
from payroll.services.enums import SupplementType, WeekendDay

NIGHT_RULE = {
    "id": "night",
    "name": "Nattillegg",
    "supplement_type": "night",
    "amount": "50",
    "time_start": "23:00",
    "time_end": "06:00",
    "priority": 1,
}


class TestWageSupplementRuleSerializer:
    def test_valid_rule(self):
        serializer = WageSupplementRuleSerializer(data=NIGHT_RULE)

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["amount"] == Decimal("50")
        assert serializer.validated_data["amount_type"] == "fixed"
        assert serializer.validated_data["is_active"] is True

    def test_invalid_time(self):
        serializer = WageSupplementRuleSerializer(data={**NIGHT_RULE, "time_end": "6am"})

        assert not serializer.is_valid()
        assert "time_end" in serializer.errors

    def test_night_rule_needs_window(self):
        data = {key: value for key, value in NIGHT_RULE.items() if not key.startswith("time_")}
        serializer = WageSupplementRuleSerializer(data=data)

        assert not serializer.is_valid()
        assert "time_start" in serializer.errors

    def test_half_window_rejected(self):
        serializer = WageSupplementRuleSerializer(data={**NIGHT_RULE, "time_end": None})

        assert not serializer.is_valid()
        assert "time_end" in serializer.errors

    def test_weekend_rule_without_window(self):
        serializer = WageSupplementRuleSerializer(
            data={"id": "sun", "name": "Søndagstillegg", "supplement_type": "weekend", "amount": 60}
        )

        assert serializer.is_valid(), serializer.errors

    def test_unknown_type(self):
        serializer = WageSupplementRuleSerializer(data={**NIGHT_RULE, "supplement_type": "overtime"})

        assert not serializer.is_valid()
        assert "supplement_type" in serializer.errors

    def test_negative_amount(self):
        serializer = WageSupplementRuleSerializer(data={**NIGHT_RULE, "amount": "-5"})

        assert not serializer.is_valid()


class TestShiftSerializer:
    def test_valid_overnight_shift(self):
        serializer = ShiftSerializer(
            data={"date": "2024-01-06", "start": "22:00", "end": "06:00", "is_weekend": True}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["date"] == date(2024, 1, 6)
        assert serializer.validated_data["break_minutes"] == 0

    def test_break_longer_than_shift(self):
        serializer = ShiftSerializer(
            data={"date": "2024-01-08", "start": "08:00", "end": "09:00", "break_minutes": 90}
        )

        assert not serializer.is_valid()
        assert "non_field_errors" in serializer.errors

    def test_zero_length_shift(self):
        serializer = ShiftSerializer(data={"date": "2024-01-08", "start": "08:00", "end": "08:00"})

        assert not serializer.is_valid()

    def test_invalid_start(self):
        serializer = ShiftSerializer(data={"date": "2024-01-08", "start": "8", "end": "16:00"})

        assert not serializer.is_valid()
        assert "start" in serializer.errors


class TestRequestSerializers:
    def test_shift_cost_request_builds_records(self):
        serializer = ShiftCostRequestSerializer(
            data={
                "shift": {"date": "2024-01-08", "start": "22:00", "end": "06:00"},
                "rules": [NIGHT_RULE],
                "hourly_rate": "250",
            }
        )

        assert serializer.is_valid(), serializer.errors
        shift = serializer.build_shift()
        (rule,) = serializer.build_rules()
        assert shift.duration_minutes == 480
        assert rule.supplement_type is SupplementType.NIGHT
        assert rule.weekend_day is WeekendDay.ANY

    def test_rules_are_optional(self):
        serializer = ShiftCostRequestSerializer(
            data={"shift": {"date": "2024-01-08", "start": "08:00", "end": "16:00"}}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.build_rules() == []

    def test_period_cost_requires_shifts(self):
        serializer = PeriodCostRequestSerializer(data={"rules": [NIGHT_RULE]})

        assert not serializer.is_valid()
        assert "shifts" in serializer.errors

    def test_sick_leave_request(self):
        serializer = SickLeaveSummaryRequestSerializer(
            data={
                "period": {"start_date": "2024-01-01", "end_date": "2024-01-31"},
                "spans": [
                    {
                        "id": "sl-1",
                        "employee_id": "emp-1",
                        "start_date": "2024-01-01",
                        "end_date": "2024-01-20",
                        "nav_takeover_date": "2024-01-10",
                    }
                ],
                "hourly_rates": {"emp-1": "300"},
            }
        )

        assert serializer.is_valid(), serializer.errors
        period = serializer.build_period()
        (span,) = serializer.build_spans()
        assert period.days == 31
        assert span.percentage == Decimal("100")
        assert span.nav_takeover_date == date(2024, 1, 10)
        assert serializer.validated_data["hourly_rates"]["emp-1"] == Decimal("300")

    def test_period_end_before_start(self):
        serializer = SickLeaveSummaryRequestSerializer(
            data={"period": {"start_date": "2024-02-01", "end_date": "2024-01-31"}, "spans": []}
        )

        assert not serializer.is_valid()
        assert "period" in serializer.errors

    def test_percentage_above_hundred(self):
        serializer = SickLeaveSummaryRequestSerializer(
            data={
                "period": {"start_date": "2024-01-01", "end_date": "2024-01-31"},
                "spans": [
                    {"id": "a", "employee_id": "e", "start_date": "2024-01-01", "percentage": 120}
                ],
            }
        )

        assert not serializer.is_valid()
        assert "spans" in serializer.errors
