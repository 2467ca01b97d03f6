"""
Data contracts for wage supplement and sick-leave calculations.

This module defines the immutable records the engine consumes (supplement
rules, shifts, sick-leave spans, payroll periods) and the value objects it
produces. Records are validated when they are constructed so malformed input
fails at the boundary instead of surfacing as a wrong number later.

All money, hour and percentage values are Decimal.
"""

import decimal
from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

from .enums import AmountType, SickLeaveStatus, SupplementType, WeekendDay

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class ValidationError(Exception):
    """Raised when a record does not conform to its contract"""
    pass


class InvalidTimeError(ValidationError):
    """Raised when a time-of-day value is not a valid "HH:MM" string"""
    pass


def to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, decimal.InvalidOperation) as e:
        raise ValidationError(f"Cannot convert {field_name} to Decimal: {value!r} - {e}")


def to_date(value: Any, field_name: str) -> Optional[date]:
    """Accept a date, an ISO date string or None"""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        # Store timestamps ("2024-01-10T00:00:00+00:00") carry the date first
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field_name} is not an ISO date: {value!r}")


def _set(instance, name: str, value: Any) -> None:
    object.__setattr__(instance, name, value)


@dataclass(frozen=True)
class WageSupplementRule:
    """Administrator-configured supplement rule, read-only during calculation"""

    id: str
    name: str
    supplement_type: SupplementType
    amount: Decimal
    amount_type: AmountType = AmountType.FIXED
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    priority: Optional[int] = None
    is_active: bool = True
    weekend_day: Optional[WeekendDay] = None
    description: Optional[str] = None

    def __post_init__(self):
        from .time_overlap import parse_time_to_minutes

        try:
            _set(self, "supplement_type", SupplementType(str(self.supplement_type)))
            _set(self, "amount_type", AmountType(str(self.amount_type)))
        except ValueError as e:
            raise ValidationError(f"Rule {self.id}: {e}")
        _set(self, "amount", to_decimal(self.amount, "amount"))

        for name in ("time_start", "time_end"):
            value = getattr(self, name)
            if value is not None:
                parse_time_to_minutes(value)

        if self.weekend_day is None:
            _set(self, "weekend_day", WeekendDay.from_rule_name(self.name))
        else:
            try:
                _set(self, "weekend_day", WeekendDay(str(self.weekend_day)))
            except ValueError as e:
                raise ValidationError(f"Rule {self.id}: {e}")

    @property
    def has_time_window(self) -> bool:
        return bool(self.time_start) and bool(self.time_end)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "WageSupplementRule":
        """
        Build a rule from a settings-store row.

        The store names the condition ``applies_to`` and the amount
        interpretation ``supplement_type``.
        """
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            supplement_type=record.get("applies_to") or record.get("type"),
            amount=record.get("amount"),
            amount_type=record.get("supplement_type")
            or record.get("amount_type")
            or AmountType.FIXED,
            time_start=record.get("time_start") or None,
            time_end=record.get("time_end") or None,
            priority=record.get("priority"),
            is_active=bool(record.get("is_active", True)),
            weekend_day=record.get("weekend_day") or None,
            description=record.get("description"),
        )


@dataclass(frozen=True)
class Shift:
    """One planned shift. ``end`` earlier than ``start`` means overnight."""

    date: date
    start: str
    end: str
    break_minutes: int = 0
    is_weekend: bool = False
    is_holiday: bool = False
    id: Optional[str] = None

    def __post_init__(self):
        from .time_overlap import shift_duration_minutes

        shift_date = to_date(self.date, "date")
        if shift_date is None:
            raise ValidationError("Shift date is required")
        _set(self, "date", shift_date)
        break_minutes = to_decimal(self.break_minutes or 0, "break_minutes")
        if not break_minutes.is_finite() or break_minutes != break_minutes.to_integral_value():
            raise ValidationError(
                f"break_minutes must be a whole number, got {self.break_minutes!r}"
            )
        _set(self, "break_minutes", int(break_minutes))
        if self.break_minutes < 0:
            raise ValidationError("break_minutes cannot be negative")

        duration = shift_duration_minutes(self.start, self.end)
        if duration <= 0:
            raise ValidationError(
                f"Shift {self.start}-{self.end} has no duration"
            )
        if self.break_minutes > duration:
            raise ValidationError(
                f"break_minutes ({self.break_minutes}) exceeds shift duration ({duration})"
            )

    @property
    def duration_minutes(self) -> int:
        from .time_overlap import shift_duration_minutes

        return shift_duration_minutes(self.start, self.end)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Shift":
        """Build a shift from a scheduling-store row (planned_* columns)"""
        return cls(
            date=record.get("date"),
            start=record.get("planned_start") or record.get("start"),
            end=record.get("planned_end") or record.get("end"),
            break_minutes=record.get("planned_break_minutes")
            or record.get("break_minutes")
            or 0,
            is_weekend=bool(record.get("is_weekend")),
            is_holiday=bool(record.get("is_holiday")),
            id=record.get("id"),
        )


@dataclass(frozen=True)
class SupplementLine:
    """Hours and cost contributed by one supplement category"""

    hours: Decimal = ZERO
    cost: Decimal = ZERO
    rule_id: Optional[str] = None


@dataclass(frozen=True)
class ShiftCostBreakdown:
    """
    Cost breakdown for one shift or a fold of many.

    ``total_cost`` is derived on construction as the plain sum of the base
    cost and the four supplement amounts, so it can never disagree with them.
    """

    base_hours: Decimal = ZERO
    base_cost: Decimal = ZERO
    night_hours: Decimal = ZERO
    night_supplement: Decimal = ZERO
    evening_hours: Decimal = ZERO
    evening_supplement: Decimal = ZERO
    weekend_supplement: Decimal = ZERO
    holiday_supplement: Decimal = ZERO
    total_cost: Decimal = field(init=False)

    def __post_init__(self):
        _set(
            self,
            "total_cost",
            self.base_cost
            + self.night_supplement
            + self.evening_supplement
            + self.weekend_supplement
            + self.holiday_supplement,
        )

    @classmethod
    def zero(cls) -> "ShiftCostBreakdown":
        return cls()

    @property
    def total_supplements(self) -> Decimal:
        return self.total_cost - self.base_cost

    def __add__(self, other: "ShiftCostBreakdown") -> "ShiftCostBreakdown":
        if not isinstance(other, ShiftCostBreakdown):
            return NotImplemented
        return ShiftCostBreakdown(
            base_hours=self.base_hours + other.base_hours,
            base_cost=self.base_cost + other.base_cost,
            night_hours=self.night_hours + other.night_hours,
            night_supplement=self.night_supplement + other.night_supplement,
            evening_hours=self.evening_hours + other.evening_hours,
            evening_supplement=self.evening_supplement + other.evening_supplement,
            weekend_supplement=self.weekend_supplement + other.weekend_supplement,
            holiday_supplement=self.holiday_supplement + other.holiday_supplement,
        )

    def to_dict(self) -> Dict[str, Decimal]:
        data = asdict(self)
        data["total_supplements"] = self.total_supplements
        return data


@dataclass(frozen=True)
class PayrollPeriod:
    """Inclusive reporting window"""

    start_date: date
    end_date: date

    def __post_init__(self):
        start = to_date(self.start_date, "start_date")
        end = to_date(self.end_date, "end_date")
        if start is None or end is None:
            raise ValidationError("Payroll period needs both start_date and end_date")
        if start > end:
            raise ValidationError(
                f"Payroll period start {start} is after end {end}"
            )
        _set(self, "start_date", start)
        _set(self, "end_date", end)

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class SickLeaveSpan:
    """One registered sick leave as supplied by the absence store"""

    id: str
    employee_id: str
    start_date: date
    end_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    actual_return_date: Optional[date] = None
    percentage: Decimal = HUNDRED
    employer_period_completed: bool = False
    nav_takeover_date: Optional[date] = None
    status: SickLeaveStatus = SickLeaveStatus.ACTIVE
    leave_type: str = ""

    def __post_init__(self):
        start = to_date(self.start_date, "start_date")
        if start is None:
            raise ValidationError(f"Sick leave {self.id} has no start_date")
        _set(self, "start_date", start)
        for name in (
            "end_date",
            "expected_return_date",
            "actual_return_date",
            "nav_takeover_date",
        ):
            _set(self, name, to_date(getattr(self, name), name))

        percentage = to_decimal(self.percentage, "percentage")
        if not ZERO <= percentage <= HUNDRED:
            raise ValidationError(
                f"Sick leave percentage must be between 0 and 100, got {percentage}"
            )
        _set(self, "percentage", percentage)

        try:
            _set(self, "status", SickLeaveStatus(str(self.status)))
        except ValueError as e:
            raise ValidationError(f"Sick leave {self.id}: {e}")

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SickLeaveSpan":
        """Build a span from an absence-store row (ISO date strings)"""
        percentage = record.get("sick_leave_percentage", record.get("percentage"))
        return cls(
            id=str(record.get("id", "")),
            employee_id=str(record.get("employee_id", "")),
            start_date=record.get("start_date"),
            end_date=record.get("end_date"),
            expected_return_date=record.get("expected_return_date"),
            actual_return_date=record.get("actual_return_date"),
            percentage=HUNDRED if percentage is None else percentage,
            employer_period_completed=bool(record.get("employer_period_completed")),
            nav_takeover_date=record.get("nav_takeover_date"),
            status=record.get("status") or SickLeaveStatus.ACTIVE,
            leave_type=record.get("leave_type") or "",
        )


@dataclass(frozen=True)
class SickLeaveApportionment:
    """A span clipped to a payroll period and split at the NAV boundary"""

    total_days: int
    employer_days: int
    nav_days: int
    effective_start: date
    effective_end: date

    @property
    def contributes(self) -> bool:
        return self.total_days > 0


@dataclass(frozen=True)
class SickLeaveFragment:
    """The part of one span that falls inside the payroll period"""

    span_id: str
    start_date: date
    end_date: date
    leave_type: str
    days_in_period: int
    employer_days: int
    nav_days: int
    percentage: Decimal
    is_employer_period: bool


@dataclass(frozen=True)
class SickLeavePayrollSummary:
    """Per-employee sick-leave totals for one payroll period"""

    employee_id: str
    employee_name: str
    total_sick_days: int = 0
    employer_period_days: int = 0
    nav_period_days: int = 0
    sick_leave_percentage: Decimal = ZERO
    fragments: Tuple[SickLeaveFragment, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["fragments"] = [asdict(fragment) for fragment in self.fragments]
        return data
