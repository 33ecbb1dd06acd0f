"""
Access decision engine.

Evaluates a kid's configuration against the current instant and today's usage.
Checks run in a fixed order and stop at the first one that blocks:

1. parent pause
2. allowed-hours window
3. daily (or weekend) minute limit
"""

from datetime import date, datetime
from typing import Optional

from ...core.clock import Clock, SystemClock, day_string, is_weekend, local_now, resolve_zone
from ...core.exceptions import InvalidArgumentError
from ...core.logging import get_logger
from .profile_store import ProfileSource
from .profiles import KidProfile
from .time_window import evaluate_window
from .types import AccessDecision, AccessReason
from .usage_store import UsageAccumulator

logger = get_logger(__name__)

PAUSED_MESSAGE = "Access is paused by a parent"


def effective_limit(profile: KidProfile, day: date) -> Optional[int]:
    """Weekend limit on Saturday and Sunday when set, otherwise the daily limit."""
    if is_weekend(day) and profile.weekend_limit_minutes is not None:
        return profile.weekend_limit_minutes
    return profile.daily_limit_minutes


class AccessDecisionEngine:
    """Produces one precedence-ordered AccessDecision per kid and instant."""

    def __init__(
        self,
        profiles: ProfileSource,
        usage: UsageAccumulator,
        clock: Optional[Clock] = None,
        default_timezone: str = "UTC",
        strict_profiles: bool = False,
    ):
        self.profiles = profiles
        self.usage = usage
        self.clock = clock or SystemClock()
        self.default_timezone = default_timezone
        self.strict_profiles = strict_profiles

    def local_now_for(self, user_id: str) -> datetime:
        """Current wall-clock time in the account's reference zone."""
        zone = resolve_zone(self.profiles.get_timezone(user_id), self.default_timezone)
        return local_now(self.clock, zone)

    def decide(self, kid_profile_id: str) -> AccessDecision:
        """Decide whether the kid may consume content right now."""
        profile = self.profiles.get_profile(kid_profile_id)
        return self.evaluate(profile, self.local_now_for(profile.user_id))

    def evaluate(self, profile: KidProfile, now: datetime) -> AccessDecision:
        """Decide for ``profile`` at ``now`` (wall-clock time in the account's zone)."""
        decision = self._evaluate(profile, now)
        logger.log_access_decision(
            profile.id, decision.allowed, decision.reason.value, date=day_string(now.date())
        )
        return decision

    def _evaluate(self, profile: KidProfile, now: datetime) -> AccessDecision:
        if profile.paused:
            return AccessDecision(
                allowed=False, reason=AccessReason.PAUSED, message=PAUSED_MESSAGE
            )

        if profile.time_window_enabled:
            if profile.has_time_window:
                check = evaluate_window(profile.allowed_start, profile.allowed_end, now)
                if not check.allowed:
                    return AccessDecision(
                        allowed=False,
                        reason=AccessReason.OUTSIDE_ALLOWED_HOURS,
                        allowed_start_hour=profile.allowed_start,
                        allowed_end_hour=profile.allowed_end,
                        message=check.message,
                    )
            else:
                self._incomplete(profile, "time_window", "allowed_start/allowed_end")

        if not profile.daily_limit_enabled:
            return AccessDecision(allowed=True, reason=AccessReason.NONE)

        limit = effective_limit(profile, now.date())
        if limit is None:
            self._incomplete(profile, "daily_limit", "daily_limit_minutes")
            return AccessDecision(allowed=True, reason=AccessReason.NONE)

        used = self.usage.used_minutes(profile.id, day_string(now.date()))
        if used >= limit:
            return AccessDecision(
                allowed=False,
                reason=AccessReason.DAILY_LIMIT_REACHED,
                used_minutes=used,
                limit_minutes=limit,
                remaining_minutes=0,
                message=f"Daily limit of {limit} minutes reached",
            )

        return AccessDecision(
            allowed=True,
            reason=AccessReason.NONE,
            used_minutes=used,
            limit_minutes=limit,
            remaining_minutes=max(0, limit - used),
        )

    def _incomplete(self, profile: KidProfile, check: str, missing: str) -> None:
        """An enabled check lacks its values: skip it, or raise in strict mode."""
        if self.strict_profiles:
            raise InvalidArgumentError(
                f"Kid profile {profile.id} enables {check} without {missing}",
                details={"kid_profile_id": profile.id, "check": check},
                component="AccessDecisionEngine",
            )
        logger.warning(
            "Skipping incomplete check",
            kid_profile_id=profile.id,
            check=check,
            missing=missing,
        )
