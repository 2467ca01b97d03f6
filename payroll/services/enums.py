"""
Enumerations for the wage supplement and sick-leave calculation engine.

This module defines all enums used across the payroll calculation system,
ensuring type safety and preventing magic string errors.
"""

from datetime import date
from enum import Enum


class SupplementType(Enum):
    """Conditions under which a wage supplement applies"""

    NIGHT = "night"
    """Time-bounded, paid per overlapping hour"""

    EVENING = "evening"
    """Time-bounded, paid per overlapping hour"""

    WEEKEND = "weekend"
    """Flat per worked hour on Saturday/Sunday shifts"""

    HOLIDAY = "holiday"
    """Percentage of base cost or flat per worked hour on public holidays"""

    def __str__(self):
        return self.value

    @property
    def is_time_bounded(self) -> bool:
        return self in (SupplementType.NIGHT, SupplementType.EVENING)


class AmountType(Enum):
    """How a supplement amount is interpreted"""

    PERCENTAGE = "percentage"
    FIXED = "fixed"

    def __str__(self):
        return self.value


class WeekendDay(Enum):
    """
    Weekday a weekend supplement is meant for.

    Rules configured before this field existed only carried the day in their
    display name ("Lørdagstillegg", "Søndagstillegg"); ``from_rule_name``
    recovers it for those records.
    """

    SATURDAY = "saturday"
    SUNDAY = "sunday"
    ANY = "any"

    def __str__(self):
        return self.value

    @classmethod
    def from_rule_name(cls, name: str) -> "WeekendDay":
        lowered = (name or "").lower()
        if "lørdag" in lowered:
            return cls.SATURDAY
        if "søndag" in lowered:
            return cls.SUNDAY
        return cls.ANY

    @classmethod
    def for_date(cls, day: date) -> "WeekendDay":
        """SATURDAY or SUNDAY for weekend dates, ANY for weekdays"""
        weekday = day.weekday()
        if weekday == 5:
            return cls.SATURDAY
        if weekday == 6:
            return cls.SUNDAY
        return cls.ANY


class SickLeaveStatus(Enum):
    """Lifecycle status of a sick-leave span"""

    ACTIVE = "active"
    COMPLETED = "completed"
    EXTENDED = "extended"
    CANCELLED = "cancelled"

    def __str__(self):
        return self.value

    @property
    def counts_for_payroll(self) -> bool:
        return self is not SickLeaveStatus.CANCELLED


class PercentageAveraging(Enum):
    """
    Policy for the running sick-leave percentage across an employee's
    fragments in one period.
    """

    LEGACY = "legacy"
    """
    Fragments at 100 % leave the running average untouched but still count
    towards the divisor of later updates. Matches historical reports.
    """

    RUNNING_MEAN = "running_mean"
    """Every fragment updates the running average"""

    def __str__(self):
        return self.value

    @classmethod
    def get_default(cls) -> "PercentageAveraging":
        return cls.LEGACY

    @classmethod
    def from_string(cls, value: str) -> "PercentageAveraging":
        """
        Parse policy from string (case-insensitive).

        Unknown or empty values fall back to the default policy.
        """
        if not value:
            return cls.get_default()
        try:
            return cls(value.lower())
        except ValueError:
            return cls.get_default()
