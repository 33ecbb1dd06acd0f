"""
Kid profiles and parent accounts.

Contains the KidProfile class holding a kid's access configuration, and the
ParentAccount class holding the family's reference timezone.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ...core.clock import resolve_zone
from ...core.exceptions import InvalidArgumentError, ValidationError
from .time_window import parse_time_of_day
from .types import TimeOfDayValue


def _require_positive_int(field_name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(field_name, value, "must be a positive integer")


@dataclass
class KidProfile:
    """Access configuration for one kid under a parent account."""

    id: str
    user_id: str
    name: str

    # Parent lockout, wins over everything else
    paused: bool = False

    # Daily quota
    daily_limit_enabled: bool = False
    daily_limit_minutes: Optional[int] = None
    weekend_limit_minutes: Optional[int] = None

    # Allowed hours; int hour or "HH:MM"
    time_window_enabled: bool = False
    allowed_start: Optional[TimeOfDayValue] = None
    allowed_end: Optional[TimeOfDayValue] = None

    created_at: float = field(default_factory=time.time)
    last_updated: float = field(default_factory=time.time)

    @property
    def has_daily_limit(self) -> bool:
        """Daily limit enabled and populated."""
        return self.daily_limit_enabled and self.daily_limit_minutes is not None

    @property
    def has_time_window(self) -> bool:
        """Time window enabled and both bounds populated."""
        return (
            self.time_window_enabled
            and self.allowed_start is not None
            and self.allowed_end is not None
        )

    def validate(self) -> None:
        """Reject configurations the engine cannot evaluate.

        Called when a profile is written, so enabled checks always carry
        their values.
        """
        if not self.id:
            raise ValidationError("id", self.id, "must not be empty")
        if not self.user_id:
            raise ValidationError("user_id", self.user_id, "must not be empty")

        if self.daily_limit_enabled or self.daily_limit_minutes is not None:
            if self.daily_limit_minutes is None:
                raise ValidationError(
                    "daily_limit_minutes", None, "required when the daily limit is enabled"
                )
            _require_positive_int("daily_limit_minutes", self.daily_limit_minutes)
        if self.weekend_limit_minutes is not None:
            _require_positive_int("weekend_limit_minutes", self.weekend_limit_minutes)

        if self.time_window_enabled:
            if self.allowed_start is None:
                raise ValidationError(
                    "allowed_start", None, "required when the time window is enabled"
                )
            if self.allowed_end is None:
                raise ValidationError(
                    "allowed_end", None, "required when the time window is enabled"
                )
        if self.allowed_start is not None:
            parse_time_of_day(self.allowed_start, "allowed_start")
        if self.allowed_end is not None:
            parse_time_of_day(self.allowed_end, "allowed_end")

    def update_last_updated(self) -> None:
        """Update the last_updated timestamp."""
        self.last_updated = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "paused": self.paused,
            "daily_limit_enabled": self.daily_limit_enabled,
            "daily_limit_minutes": self.daily_limit_minutes,
            "weekend_limit_minutes": self.weekend_limit_minutes,
            "time_window_enabled": self.time_window_enabled,
            "allowed_start": self.allowed_start,
            "allowed_end": self.allowed_end,
            "created_at": self.created_at,
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KidProfile":
        """Create from dictionary."""
        now = time.time()
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            name=data.get("name", ""),
            paused=data.get("paused", False),
            daily_limit_enabled=data.get("daily_limit_enabled", False),
            daily_limit_minutes=data.get("daily_limit_minutes"),
            weekend_limit_minutes=data.get("weekend_limit_minutes"),
            time_window_enabled=data.get("time_window_enabled", False),
            allowed_start=data.get("allowed_start"),
            allowed_end=data.get("allowed_end"),
            created_at=data.get("created_at", now),
            last_updated=data.get("last_updated", now),
        )


@dataclass
class ParentAccount:
    """A parent account and the zone its family's days are counted in."""

    user_id: str
    timezone: Optional[str] = None

    def validate(self) -> None:
        if self.timezone is not None:
            try:
                resolve_zone(self.timezone)
            except InvalidArgumentError as e:
                raise ValidationError("timezone", self.timezone, "unknown IANA zone") from e

    def to_dict(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "timezone": self.timezone}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParentAccount":
        return cls(user_id=data["user_id"], timezone=data.get("timezone"))
