"""
Time-of-day overlap arithmetic for wage supplement windows.

Shift and rule windows are plain clock times without a date. An end time
numerically before the start time means the interval runs past midnight.
"""

import re
from datetime import time
from decimal import Decimal
from typing import Union

from .contracts import InvalidTimeError

MINUTES_PER_DAY = 24 * 60
MINUTES_PER_HOUR = Decimal("60")

# "HH:MM" with optional ":SS" (SQL time columns); 24:00 is end of day
_TIME_RE = re.compile(r"^(?:([01]\d|2[0-3]):([0-5]\d)|(24):(00))(?::([0-5]\d))?$")

TimeValue = Union[str, time]


def parse_time_to_minutes(value: TimeValue) -> int:
    """
    Convert a clock time to minutes since midnight.

    Args:
        value: "HH:MM" (or "HH:MM:SS", seconds ignored) or datetime.time

    Returns:
        int: Minutes since midnight, 0..1440

    Raises:
        InvalidTimeError: If value is not a valid clock time
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise InvalidTimeError(f"Expected a time string 'HH:MM', got {value!r}")

    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidTimeError(f"Invalid time {value!r}, expected 'HH:MM'")

    hours = match.group(1) or match.group(3)
    minutes = match.group(2) or match.group(4)
    return int(hours) * 60 + int(minutes)


def shift_duration_minutes(start: TimeValue, end: TimeValue) -> int:
    """Shift length in minutes, wrapping past midnight when end < start"""
    duration = parse_time_to_minutes(end) - parse_time_to_minutes(start)
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def simple_overlap_minutes(
    a_start: int, a_end: int, b_start: int, b_end: int
) -> int:
    """Overlap of two linear minute ranges, never negative"""
    return max(0, min(a_end, b_end) - max(a_start, b_start))


def overlap_minutes(
    shift_start: TimeValue,
    shift_end: TimeValue,
    rule_start: TimeValue,
    rule_end: TimeValue,
) -> int:
    """
    Minutes of a shift that fall inside a rule's time window.

    An overnight shift is laid out on a 0..2880 line by extending its end
    past 1440. A rule window that wraps midnight is decomposed into
    [rule_start, 1440) and [0, rule_end); the part of an overnight shift
    that lies past midnight is matched against [0, rule_end) as well.
    """
    ss = parse_time_to_minutes(shift_start)
    se = parse_time_to_minutes(shift_end)
    rs = parse_time_to_minutes(rule_start)
    re_ = parse_time_to_minutes(rule_end)

    if se < ss:
        se += MINUTES_PER_DAY

    if re_ < rs:
        evening_part = simple_overlap_minutes(ss, se, rs, MINUTES_PER_DAY)
        morning_part = simple_overlap_minutes(ss, se, 0, re_)
        after_midnight = (
            simple_overlap_minutes(0, se - MINUTES_PER_DAY, 0, re_)
            if se > MINUTES_PER_DAY
            else 0
        )
        return evening_part + morning_part + after_midnight

    return simple_overlap_minutes(ss, se, rs, re_)


def overlap_hours(
    shift_start: TimeValue,
    shift_end: TimeValue,
    rule_start: TimeValue,
    rule_end: TimeValue,
) -> Decimal:
    """Overlap between a shift and a rule window, in hours"""
    minutes = overlap_minutes(shift_start, shift_end, rule_start, rule_end)
    return Decimal(minutes) / MINUTES_PER_HOUR
