"""
Tests for the access decision engine.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from conftest import SATURDAY_NOON, make_profile, utc

from playtime_guard.core.clock import FixedClock, resolve_zone
from playtime_guard.core.exceptions import InvalidArgumentError, NotFoundError
from playtime_guard.features.time_controls import (
    AccessDecisionEngine,
    AccessReason,
    KidProfile,
    TimeControlService,
)

UTC_ZONE = ZoneInfo("UTC")


def at(hour: int, minute: int = 0) -> datetime:
    """Tuesday 2026-10-20 at the given UTC wall-clock time."""
    return datetime(2026, 10, 20, hour, minute, tzinfo=UTC_ZONE)


class TestPrecedence:
    """Test that the first violated check wins."""

    def test_paused_wins_over_everything(self, service: TimeControlService, clock: FixedClock) -> None:
        clock.set(utc(2026, 10, 20, 23))
        service.profiles.save_profile(
            make_profile(
                paused=True,
                time_window_enabled=True,
                allowed_start=8,
                allowed_end=20,
                daily_limit_enabled=True,
                daily_limit_minutes=30,
            )
        )
        service.add_usage("k1", 45)

        decision = service.check_access("k1")
        assert not decision.allowed
        assert decision.reason == AccessReason.PAUSED
        assert decision.used_minutes is None
        assert decision.limit_minutes is None
        assert decision.message == "Access is paused by a parent"

    def test_window_wins_over_limit(self, service: TimeControlService, clock: FixedClock) -> None:
        clock.set(utc(2026, 10, 20, 21))
        service.profiles.save_profile(
            make_profile(
                time_window_enabled=True,
                allowed_start=8,
                allowed_end=20,
                daily_limit_enabled=True,
                daily_limit_minutes=30,
            )
        )
        service.add_usage("k1", 45)

        decision = service.check_access("k1")
        assert not decision.allowed
        assert decision.reason == AccessReason.OUTSIDE_ALLOWED_HOURS
        assert decision.allowed_start_hour == 8
        assert decision.allowed_end_hour == 20
        assert decision.message == "available from 8:00 AM to 8:00 PM"
        assert decision.used_minutes is None

    def test_limit_applies_inside_window(self, service: TimeControlService) -> None:
        service.profiles.save_profile(
            make_profile(
                time_window_enabled=True,
                allowed_start=8,
                allowed_end=20,
                daily_limit_enabled=True,
                daily_limit_minutes=30,
            )
        )
        service.add_usage("k1", 30)

        decision = service.check_access("k1")
        assert decision.reason == AccessReason.DAILY_LIMIT_REACHED
        assert decision.allowed_start_hour is None

    def test_no_checks_enabled(self, service: TimeControlService) -> None:
        service.profiles.save_profile(make_profile())

        decision = service.check_access("k1")
        assert decision.allowed
        assert decision.reason == AccessReason.NONE
        assert decision.to_dict() == {"allowed": True, "reason": "NONE"}

    def test_inside_window_without_limit(self, service: TimeControlService) -> None:
        service.profiles.save_profile(
            make_profile(time_window_enabled=True, allowed_start="07:30", allowed_end="21:00")
        )

        decision = service.check_access("k1")
        assert decision.allowed
        assert decision.remaining_minutes is None
        assert decision.message is None


class TestDailyLimit:
    """Test quota evaluation."""

    def test_usage_scenario(self, service: TimeControlService) -> None:
        """30 minute limit: 20 used leaves 10, another 15 blocks."""
        service.profiles.save_profile(make_profile(daily_limit_enabled=True, daily_limit_minutes=30))

        service.add_usage("k1", 20)
        decision = service.check_access("k1")
        assert decision.allowed
        assert decision.reason == AccessReason.NONE
        assert decision.used_minutes == 20
        assert decision.limit_minutes == 30
        assert decision.remaining_minutes == 10

        service.add_usage("k1", 15)
        decision = service.check_access("k1")
        assert not decision.allowed
        assert decision.reason == AccessReason.DAILY_LIMIT_REACHED
        assert decision.used_minutes == 35
        assert decision.limit_minutes == 30
        assert decision.remaining_minutes == 0
        assert decision.message == "Daily limit of 30 minutes reached"

    def test_exactly_at_limit_blocks(self, service: TimeControlService) -> None:
        service.profiles.save_profile(make_profile(daily_limit_enabled=True, daily_limit_minutes=30))
        service.add_usage("k1", 30)
        assert service.check_access("k1").reason == AccessReason.DAILY_LIMIT_REACHED

    def test_nothing_used_yet(self, service: TimeControlService) -> None:
        service.profiles.save_profile(make_profile(daily_limit_enabled=True, daily_limit_minutes=30))

        decision = service.check_access("k1")
        assert decision.allowed
        assert decision.used_minutes == 0
        assert decision.remaining_minutes == 30

    def test_reset_lifts_block(self, service: TimeControlService) -> None:
        service.profiles.save_profile(make_profile(daily_limit_enabled=True, daily_limit_minutes=30))
        service.add_usage("k1", 40)
        service.reset_daily_usage("k1")

        decision = service.check_access("k1")
        assert decision.allowed
        assert decision.remaining_minutes == 30

    def test_yesterdays_usage_does_not_count(
        self, service: TimeControlService, clock: FixedClock
    ) -> None:
        service.profiles.save_profile(make_profile(daily_limit_enabled=True, daily_limit_minutes=30))
        clock.set(utc(2026, 10, 19, 18))
        service.add_usage("k1", 40)
        clock.set(utc(2026, 10, 20, 8))

        assert service.check_access("k1").allowed


class TestWeekendLimit:
    """Test the Saturday/Sunday limit override."""

    def _save(self, service: TimeControlService) -> None:
        service.profiles.save_profile(
            make_profile(
                daily_limit_enabled=True, daily_limit_minutes=60, weekend_limit_minutes=120
            )
        )

    def test_saturday_uses_weekend_limit(
        self, service: TimeControlService, clock: FixedClock
    ) -> None:
        self._save(service)
        clock.set(SATURDAY_NOON)
        service.add_usage("k1", 90)

        decision = service.check_access("k1")
        assert decision.allowed
        assert decision.limit_minutes == 120
        assert decision.remaining_minutes == 30

    def test_tuesday_uses_daily_limit(self, service: TimeControlService) -> None:
        self._save(service)
        service.add_usage("k1", 90)

        decision = service.check_access("k1")
        assert not decision.allowed
        assert decision.reason == AccessReason.DAILY_LIMIT_REACHED
        assert decision.limit_minutes == 60

    def test_weekend_is_judged_in_account_zone(
        self, service: TimeControlService, clock: FixedClock
    ) -> None:
        self._save(service)
        service.profiles.set_account_timezone("u1", "Pacific/Auckland")
        # Friday in UTC, already Saturday 01:00 in Auckland
        clock.set(utc(2026, 10, 16, 12))

        assert service.check_access("k1").limit_minutes == 120

    def test_daily_limit_without_weekend_override(
        self, service: TimeControlService, clock: FixedClock
    ) -> None:
        service.profiles.save_profile(make_profile(daily_limit_enabled=True, daily_limit_minutes=60))
        clock.set(SATURDAY_NOON)
        assert service.check_access("k1").limit_minutes == 60


class TestTimeWindow:
    """Test window checks in the account's zone."""

    def test_overnight_window(self, service: TimeControlService, clock: FixedClock) -> None:
        service.profiles.save_profile(
            make_profile(time_window_enabled=True, allowed_start=20, allowed_end=8)
        )

        clock.set(utc(2026, 10, 20, 22))
        assert service.check_access("k1").allowed

        clock.set(utc(2026, 10, 20, 12))
        decision = service.check_access("k1")
        assert decision.reason == AccessReason.OUTSIDE_ALLOWED_HOURS
        assert decision.message == "available from 8:00 PM to 8:00 AM"

    def test_window_uses_account_zone(self, service: TimeControlService, clock: FixedClock) -> None:
        service.profiles.save_profile(
            make_profile(time_window_enabled=True, allowed_start=8, allowed_end=20)
        )
        service.profiles.set_account_timezone("u1", "America/Los_Angeles")

        # 13:00 UTC is 06:00 in Los Angeles
        clock.set(utc(2026, 10, 20, 13))
        assert not service.check_access("k1").allowed

        # 16:00 UTC is 09:00 in Los Angeles
        clock.set(utc(2026, 10, 20, 16))
        assert service.check_access("k1").allowed

    def test_default_timezone_applies_without_account(
        self, test_config, clock: FixedClock
    ) -> None:
        from playtime_guard.features.time_controls import create_time_control_service

        test_config.time_controls.default_timezone = "Asia/Tokyo"
        svc = create_time_control_service(test_config, clock=clock)
        try:
            svc.profiles.save_profile(
                make_profile(time_window_enabled=True, allowed_start=8, allowed_end=20)
            )
            # 12:00 UTC is 21:00 in Tokyo
            assert not svc.check_access("k1").allowed
        finally:
            svc.store.close()


class TestIncompleteProfiles:
    """Test enabled checks that lack their values."""

    def _incomplete_profiles(self):
        return [
            KidProfile(id="k9", user_id="u1", name="N", daily_limit_enabled=True),
            KidProfile(id="k9", user_id="u1", name="N", time_window_enabled=True, allowed_start=8),
        ]

    def test_fail_open_by_default(self, service: TimeControlService) -> None:
        for profile in self._incomplete_profiles():
            decision = service.engine.evaluate(profile, at(23))
            assert decision.allowed
            assert decision.reason == AccessReason.NONE

    def test_strict_mode_raises(self, service: TimeControlService, clock: FixedClock) -> None:
        engine = AccessDecisionEngine(
            service.profiles, service.usage, clock, strict_profiles=True
        )
        for profile in self._incomplete_profiles():
            with pytest.raises(InvalidArgumentError):
                engine.evaluate(profile, at(23))

    def test_strict_mode_from_config(self, test_config, clock: FixedClock) -> None:
        from playtime_guard.features.time_controls import create_time_control_service

        test_config.time_controls.strict_profiles = True
        svc = create_time_control_service(test_config, clock=clock)
        try:
            assert svc.engine.strict_profiles
        finally:
            svc.store.close()

    def test_weekend_limit_alone_does_not_enable_quota(self, service: TimeControlService) -> None:
        profile = KidProfile(id="k9", user_id="u1", name="N", weekend_limit_minutes=90)
        decision = service.engine.evaluate(profile, at(12))
        assert decision.allowed
        assert decision.limit_minutes is None


class TestLookup:
    """Test kid resolution."""

    def test_unknown_kid(self, service: TimeControlService) -> None:
        with pytest.raises(NotFoundError):
            service.check_access("missing")


class TestResolveZone:
    """Test IANA zone lookup."""

    def test_fallback_when_unset(self) -> None:
        assert resolve_zone(None, "Asia/Tokyo") == ZoneInfo("Asia/Tokyo")

    @pytest.mark.parametrize("name", ["Mars/Olympus", "America", "../etc/passwd"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_zone(name)
        assert exc_info.value.details["timezone"] == name
