"""
Time controls types and data structures.

Contains enums and data classes shared by the usage store, the access decision
engine and the fleet reporter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

# An allowed-hours bound: an hour in [0, 23] or an "HH:MM" string
TimeOfDayValue = Union[int, str]


class AccessReason(Enum):
    """Why access was granted or denied. Listed in evaluation order."""

    PAUSED = "PAUSED"
    OUTSIDE_ALLOWED_HOURS = "OUTSIDE_ALLOWED_HOURS"
    DAILY_LIMIT_REACHED = "DAILY_LIMIT_REACHED"
    NONE = "NONE"


@dataclass(frozen=True)
class AccessDecision:
    """Single allow/deny verdict for a kid at one instant."""

    allowed: bool
    reason: AccessReason
    used_minutes: Optional[float] = None
    limit_minutes: Optional[int] = None
    remaining_minutes: Optional[float] = None
    allowed_start_hour: Optional[TimeOfDayValue] = None
    allowed_end_hour: Optional[TimeOfDayValue] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting fields that do not apply."""
        data: Dict[str, Any] = {
            "allowed": self.allowed,
            "reason": self.reason.value,
        }
        optional = {
            "used_minutes": self.used_minutes,
            "limit_minutes": self.limit_minutes,
            "remaining_minutes": self.remaining_minutes,
            "allowed_start_hour": self.allowed_start_hour,
            "allowed_end_hour": self.allowed_end_hour,
            "message": self.message,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class DailyUsageRecord:
    """Minutes consumed by one kid on one calendar day."""

    kid_profile_id: str
    date: str  # YYYY-MM-DD in the account's reference zone
    total_minutes_used: float
    last_updated_at: Optional[float] = None  # epoch seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kid_profile_id": self.kid_profile_id,
            "date": self.date,
            "total_minutes_used": self.total_minutes_used,
            "last_updated_at": self.last_updated_at,
        }


@dataclass(frozen=True)
class UsageToday:
    """Today's usage for a kid; zeroed when nothing has been recorded."""

    date: str
    total_minutes_used: float = 0
    last_updated_at: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "total_minutes_used": self.total_minutes_used,
            "last_updated_at": self.last_updated_at,
        }


@dataclass(frozen=True)
class FleetEntry:
    """One kid's row in a parent's dashboard summary."""

    kid_profile_id: str
    kid_name: str
    decision: AccessDecision

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kid_profile_id": self.kid_profile_id,
            "kid_name": self.kid_name,
            "decision": self.decision.to_dict(),
        }
