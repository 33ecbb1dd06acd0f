"""
Tests for daily usage accounting.
"""

import math
import threading

import pytest
from conftest import make_profile, utc

from playtime_guard.core.clock import FixedClock
from playtime_guard.core.config import Config
from playtime_guard.core.exceptions import InvalidArgumentError, NotFoundError
from playtime_guard.features.time_controls import TimeControlService, create_time_control_service


@pytest.fixture
def kid(service: TimeControlService) -> str:
    service.profiles.save_profile(make_profile("k1", daily_limit_enabled=True, daily_limit_minutes=30))
    return "k1"


class TestAddUsage:
    """Test recording elapsed minutes."""

    def test_first_report_creates_record(self, service: TimeControlService, kid: str) -> None:
        assert service.add_usage(kid, 20) == 20

        usage = service.get_usage_today(kid)
        assert usage.date == "2026-10-20"
        assert usage.total_minutes_used == 20
        assert usage.last_updated_at is not None

    def test_reports_accumulate(self, service: TimeControlService, kid: str) -> None:
        service.add_usage(kid, 20)
        assert service.add_usage(kid, 15) == 35
        assert service.add_usage(kid, 0.5) == 35.5
        assert service.get_usage_today(kid).total_minutes_used == 35.5

    @pytest.mark.parametrize("minutes", [0, -1, -0.5, math.nan, math.inf, True, "5", None])
    def test_rejects_invalid_minutes(
        self, service: TimeControlService, kid: str, minutes: object
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            service.add_usage(kid, minutes)  # type: ignore[arg-type]

        # Nothing written
        assert service.get_usage_history(kid, 7) == []

    def test_unknown_kid(self, service: TimeControlService) -> None:
        with pytest.raises(NotFoundError):
            service.add_usage("missing", 5)

    def test_concurrent_reports_are_not_lost(self, service: TimeControlService, kid: str) -> None:
        threads_count = 8
        reports_per_thread = 25
        errors = []

        def report() -> None:
            try:
                for _ in range(reports_per_thread):
                    service.add_usage(kid, 1)
            except Exception as e:  # pragma: no cover - surfaced below
                errors.append(e)

        threads = [threading.Thread(target=report) for _ in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert service.get_usage_today(kid).total_minutes_used == threads_count * reports_per_thread

    def test_concurrent_reports_across_services(
        self, service: TimeControlService, kid: str, test_config: Config, clock: FixedClock
    ) -> None:
        other = create_time_control_service(test_config, clock=clock)
        reports_per_thread = 25
        errors = []

        def report(svc: TimeControlService) -> None:
            try:
                for _ in range(reports_per_thread):
                    svc.add_usage(kid, 1)
            except Exception as e:  # pragma: no cover - surfaced below
                errors.append(e)

        threads = [
            threading.Thread(target=report, args=(svc,))
            for svc in (service, other, service, other)
        ]
        try:
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        finally:
            other.store.close()

        assert errors == []
        assert service.get_usage_today(kid).total_minutes_used == len(threads) * reports_per_thread


class TestUsageToday:
    """Test reading today's usage."""

    def test_zeroed_when_nothing_recorded(self, service: TimeControlService, kid: str) -> None:
        usage = service.get_usage_today(kid)
        assert usage.date == "2026-10-20"
        assert usage.total_minutes_used == 0
        assert usage.last_updated_at is None

    def test_unknown_kid(self, service: TimeControlService) -> None:
        with pytest.raises(NotFoundError):
            service.get_usage_today("missing")

    def test_day_rollover(
        self, service: TimeControlService, kid: str, clock: FixedClock
    ) -> None:
        clock.set(utc(2026, 10, 20, 23, 30))
        service.add_usage(kid, 20)

        clock.set(utc(2026, 10, 21, 0, 10))
        usage = service.get_usage_today(kid)
        assert usage.date == "2026-10-21"
        assert usage.total_minutes_used == 0

        assert service.add_usage(kid, 5) == 5
        history = service.get_usage_history(kid, 1)
        assert [(r.date, r.total_minutes_used) for r in history] == [
            ("2026-10-21", 5),
            ("2026-10-20", 20),
        ]

    def test_today_follows_account_timezone(
        self, service: TimeControlService, kid: str, clock: FixedClock
    ) -> None:
        service.profiles.set_account_timezone("u1", "America/New_York")
        # 22:00 on the 20th in New York
        clock.set(utc(2026, 10, 21, 2, 0))

        service.add_usage(kid, 10)
        assert service.get_usage_today(kid).date == "2026-10-20"


class TestResetDailyUsage:
    """Test the parent reset."""

    def test_reset_zeroes_without_deleting(self, service: TimeControlService, kid: str) -> None:
        service.add_usage(kid, 20)
        service.reset_daily_usage(kid)

        assert service.get_usage_today(kid).total_minutes_used == 0
        history = service.get_usage_history(kid, 0)
        assert len(history) == 1
        assert history[0].total_minutes_used == 0

    def test_reset_is_idempotent(self, service: TimeControlService, kid: str) -> None:
        service.add_usage(kid, 20)
        service.reset_daily_usage(kid)
        service.reset_daily_usage(kid)
        assert service.get_usage_today(kid).total_minutes_used == 0

    def test_reset_without_record_creates_nothing(
        self, service: TimeControlService, kid: str
    ) -> None:
        service.reset_daily_usage(kid)
        assert service.get_usage_history(kid, 7) == []

    def test_usage_resumes_after_reset(self, service: TimeControlService, kid: str) -> None:
        service.add_usage(kid, 30)
        service.reset_daily_usage(kid)
        assert service.add_usage(kid, 5) == 5

    def test_reset_only_touches_today(
        self, service: TimeControlService, kid: str, clock: FixedClock
    ) -> None:
        clock.set(utc(2026, 10, 19, 12))
        service.add_usage(kid, 40)
        clock.set(utc(2026, 10, 20, 12))
        service.add_usage(kid, 10)

        service.reset_daily_usage(kid)

        history = service.get_usage_history(kid, 7)
        assert [(r.date, r.total_minutes_used) for r in history] == [
            ("2026-10-20", 0),
            ("2026-10-19", 40),
        ]

    def test_unknown_kid(self, service: TimeControlService) -> None:
        with pytest.raises(NotFoundError):
            service.reset_daily_usage("missing")


class TestUsageHistory:
    """Test the history query."""

    def _record_days(self, service: TimeControlService, kid: str, clock: FixedClock) -> None:
        for day, minutes in [(10, 5), (13, 13), (14, 14), (20, 20)]:
            clock.set(utc(2026, 10, day, 12))
            service.add_usage(kid, minutes)

    def test_newest_first_within_cutoff(
        self, service: TimeControlService, kid: str, clock: FixedClock
    ) -> None:
        self._record_days(service, kid, clock)

        history = service.get_usage_history(kid, 7)
        assert [r.date for r in history] == ["2026-10-20", "2026-10-14", "2026-10-13"]
        assert all(r.kid_profile_id == kid for r in history)

    def test_zero_days_is_today_only(
        self, service: TimeControlService, kid: str, clock: FixedClock
    ) -> None:
        self._record_days(service, kid, clock)
        assert [r.date for r in service.get_usage_history(kid, 0)] == ["2026-10-20"]

    def test_default_days_from_config(
        self, service: TimeControlService, kid: str, clock: FixedClock
    ) -> None:
        self._record_days(service, kid, clock)
        assert len(service.get_usage_history(kid)) == 3

    def test_history_is_per_kid(self, service: TimeControlService, kid: str) -> None:
        service.profiles.save_profile(make_profile("k2"))
        service.add_usage(kid, 10)
        service.add_usage("k2", 3)

        history = service.get_usage_history("k2", 7)
        assert [(r.kid_profile_id, r.total_minutes_used) for r in history] == [("k2", 3)]

    @pytest.mark.parametrize("days", [-1, 1.5, True, "7"])
    def test_rejects_invalid_days(
        self, service: TimeControlService, kid: str, days: object
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            service.get_usage_history(kid, days)  # type: ignore[arg-type]

    def test_unknown_kid(self, service: TimeControlService) -> None:
        with pytest.raises(NotFoundError):
            service.get_usage_history("missing", 7)
