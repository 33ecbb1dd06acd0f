"""
Allowed-hours window evaluation.

Pure functions: the caller supplies the instant, nothing here reads a clock.
Bounds are minutes since local midnight, the window is half-open
``[start, end)``, and ``start > end`` means the window wraps past midnight.
``start == end`` allows the whole day.
"""

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Tuple, Union

from ...core.exceptions import ValidationError
from .types import TimeOfDayValue


@dataclass(frozen=True)
class WindowCheck:
    """Outcome of testing one instant against a window."""

    allowed: bool
    message: Optional[str] = None


def parse_time_of_day(value: TimeOfDayValue, field: str = "time") -> Tuple[int, int]:
    """Parse an hour (``20``) or ``"HH:MM"`` string (``"20:30"``) into (hour, minute)."""
    if isinstance(value, bool):
        raise ValidationError(field, value, "expected an hour or HH:MM string")

    if isinstance(value, int):
        hour, minute = value, 0
    elif isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValidationError(field, value, "expected HH:MM")
        hour, minute = int(parts[0]), int(parts[1])
    else:
        raise ValidationError(field, value, "expected an hour or HH:MM string")

    if not 0 <= hour <= 23:
        raise ValidationError(field, value, "hour must be between 0 and 23")
    if not 0 <= minute <= 59:
        raise ValidationError(field, value, "minute must be between 0 and 59")
    return hour, minute


def to_minutes(hour: int, minute: int = 0) -> int:
    return hour * 60 + minute


def format_time_of_day(hour: int, minute: int = 0) -> str:
    """12-hour clock text, e.g. ``8:00 AM``, ``12:30 PM``, ``12:00 AM``."""
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def window_message(start: TimeOfDayValue, end: TimeOfDayValue) -> str:
    start_h, start_m = parse_time_of_day(start, "allowed_start")
    end_h, end_m = parse_time_of_day(end, "allowed_end")
    return (
        f"available from {format_time_of_day(start_h, start_m)} "
        f"to {format_time_of_day(end_h, end_m)}"
    )


def is_within_window(
    start: TimeOfDayValue, end: TimeOfDayValue, instant: Union[datetime, time]
) -> bool:
    """Return True when ``instant`` (local wall-clock) falls inside the window."""
    start_total = to_minutes(*parse_time_of_day(start, "allowed_start"))
    end_total = to_minutes(*parse_time_of_day(end, "allowed_end"))
    current = to_minutes(instant.hour, instant.minute)

    if start_total == end_total:
        return True
    if start_total < end_total:
        return start_total <= current < end_total
    # Wraps midnight, e.g. 20:00-08:00
    return current >= start_total or current < end_total


def evaluate_window(
    start: TimeOfDayValue, end: TimeOfDayValue, instant: Union[datetime, time]
) -> WindowCheck:
    """Test ``instant`` against the window, with client text when blocked."""
    if is_within_window(start, end, instant):
        return WindowCheck(allowed=True)
    return WindowCheck(allowed=False, message=window_message(start, end))
