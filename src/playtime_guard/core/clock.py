"""
Clock and timezone helpers.

Every "now" and "today" in the engine is computed from an injected clock and an
explicit IANA zone, never from the host's local time.
"""

from datetime import date, datetime, timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import InvalidArgumentError

DATE_FORMAT = "%Y-%m-%d"


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        ...


class SystemClock:
    """Clock backed by the system's UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant, movable by hand."""

    def __init__(self, instant: datetime):
        self.set(instant)

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise InvalidArgumentError(
                "FixedClock requires a timezone-aware datetime", component="FixedClock"
            )
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


def resolve_zone(name: Optional[str], fallback: str = "UTC") -> ZoneInfo:
    """Return the ZoneInfo for ``name``, or for ``fallback`` when name is empty."""
    zone_name = name or fallback
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidArgumentError(
            f"Unknown timezone: {zone_name}",
            details={"timezone": zone_name},
            component="clock",
        ) from e


def local_now(clock: Clock, zone: ZoneInfo) -> datetime:
    """Current instant expressed as wall-clock time in ``zone``."""
    return clock.now().astimezone(zone)


def day_string(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def is_weekend(day: date) -> bool:
    """Saturday or Sunday."""
    return day.weekday() >= 5
