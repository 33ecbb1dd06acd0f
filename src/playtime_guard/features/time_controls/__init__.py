"""
Time controls feature package.

Provides daily usage accounting, allowed-hours windows and per-kid access
decisions for parent accounts.
"""

from .engine import AccessDecisionEngine, effective_limit
from .fleet import FleetStatusReporter
from .profile_store import KidProfileRepository, ProfileSource
from .profiles import KidProfile, ParentAccount
from .service import TimeControlService, create_time_control_service
from .time_window import (
    WindowCheck,
    evaluate_window,
    format_time_of_day,
    is_within_window,
    parse_time_of_day,
    window_message,
)
from .types import (
    AccessDecision,
    AccessReason,
    DailyUsageRecord,
    FleetEntry,
    TimeOfDayValue,
    UsageToday,
)
from .usage_store import UsageAccumulator, UsageStore

__all__ = [
    # Service
    "TimeControlService",
    "create_time_control_service",
    # Components
    "AccessDecisionEngine",
    "FleetStatusReporter",
    "KidProfileRepository",
    "ProfileSource",
    "UsageAccumulator",
    "UsageStore",
    "effective_limit",
    # Profiles
    "KidProfile",
    "ParentAccount",
    # Time windows
    "WindowCheck",
    "evaluate_window",
    "format_time_of_day",
    "is_within_window",
    "parse_time_of_day",
    "window_message",
    # Types
    "AccessDecision",
    "AccessReason",
    "DailyUsageRecord",
    "FleetEntry",
    "TimeOfDayValue",
    "UsageToday",
]
