"""
Time control service.

Wires the usage store, profile repository, decision engine and fleet reporter
together behind one object for the HTTP API, the CLI and playback clients.
"""

from typing import Any, Dict, List, Optional

from ...core.clock import Clock, SystemClock, day_string
from ...core.config import Config
from ...core.database.connection_pool import PoolConfig, SQLiteConnectionPool
from ...core.logging import get_logger
from .engine import AccessDecisionEngine, effective_limit
from .fleet import FleetStatusReporter
from .profile_store import KidProfileRepository
from .time_window import evaluate_window, window_message
from .types import AccessDecision, DailyUsageRecord, FleetEntry, UsageToday
from .usage_store import UsageAccumulator, UsageStore

logger = get_logger(__name__)


class TimeControlService:
    """Entry point for usage reporting, access checks and the parent dashboard."""

    def __init__(self, config: Config, clock: Optional[Clock] = None):
        self.config = config
        self.clock = clock or SystemClock()
        default_timezone = config.time_controls.default_timezone

        self.pool = SQLiteConnectionPool(
            str(config.storage.usage_db_path),
            PoolConfig(
                max_connections=config.storage.max_connections,
                connection_timeout=config.storage.busy_timeout_s,
                enable_wal_mode=config.storage.enable_wal_mode,
            ),
        )
        self.profiles = KidProfileRepository(config.storage.profiles_dir)
        self.store = UsageStore(self.pool)
        self.usage = UsageAccumulator(
            self.store, self.profiles, self.clock, default_timezone
        )
        self.engine = AccessDecisionEngine(
            self.profiles,
            self.usage,
            self.clock,
            default_timezone,
            strict_profiles=config.time_controls.strict_profiles,
        )
        self.fleet = FleetStatusReporter(self.profiles, self.engine)

    async def initialize(self) -> None:
        await self.profiles.initialize()
        logger.info(
            "Time control service initialized",
            usage_db=str(self.config.storage.usage_db_path),
            profiles_dir=str(self.config.storage.profiles_dir),
        )

    async def shutdown(self) -> None:
        await self.profiles.shutdown()
        self.store.close()
        logger.info("Time control service shutdown")

    # Usage

    def add_usage(self, kid_profile_id: str, minutes: float) -> float:
        return self.usage.add_usage(kid_profile_id, minutes)

    def get_usage_today(self, kid_profile_id: str) -> UsageToday:
        return self.usage.get_usage_today(kid_profile_id)

    def reset_daily_usage(self, kid_profile_id: str) -> None:
        self.usage.reset_daily_usage(kid_profile_id)

    def get_usage_history(
        self, kid_profile_id: str, days: Optional[int] = None
    ) -> List[DailyUsageRecord]:
        if days is None:
            days = self.config.time_controls.history_default_days
        return self.usage.get_usage_history(kid_profile_id, days)

    # Decisions

    def check_access(self, kid_profile_id: str) -> AccessDecision:
        return self.engine.decide(kid_profile_id)

    def get_fleet_status(self, user_id: str) -> List[FleetEntry]:
        return self.fleet.get_fleet_status(user_id)

    def get_time_limit_settings(self, kid_profile_id: str) -> Dict[str, Any]:
        """Configuration and today's standing for the settings screen.

        Reports the raw limit and window state independently of the pause
        flag and of check precedence; use check_access for the verdict.
        """
        profile = self.profiles.get_profile(kid_profile_id)
        now = self.engine.local_now_for(profile.user_id)
        today = day_string(now.date())
        used = self.usage.used_minutes(kid_profile_id, today)

        limit = effective_limit(profile, now.date()) if profile.has_daily_limit else None
        remaining = max(0, limit - used) if limit is not None else None

        outside_hours = False
        time_of_day_message = None
        if profile.has_time_window:
            outside_hours = not evaluate_window(
                profile.allowed_start, profile.allowed_end, now
            ).allowed
            time_of_day_message = window_message(profile.allowed_start, profile.allowed_end)

        return {
            "kid_profile_id": profile.id,
            "date": today,
            "paused": profile.paused,
            "daily_limit_enabled": profile.daily_limit_enabled,
            "daily_limit_minutes": profile.daily_limit_minutes,
            "weekend_limit_minutes": profile.weekend_limit_minutes,
            "effective_limit_minutes": limit,
            "used_minutes": used,
            "remaining_minutes": remaining,
            "is_limit_reached": limit is not None and used >= limit,
            "time_window_enabled": profile.time_window_enabled,
            "allowed_start": profile.allowed_start,
            "allowed_end": profile.allowed_end,
            "is_outside_allowed_hours": outside_hours,
            "time_of_day_message": time_of_day_message,
        }


def create_time_control_service(
    config: Optional[Config] = None, clock: Optional[Clock] = None
) -> TimeControlService:
    """Create a new time control service instance."""
    return TimeControlService(config or Config(), clock=clock)
