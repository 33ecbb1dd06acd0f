"""
Per-kid, per-day usage accounting.

UsageStore persists one counter per (kid, calendar day) in SQLite.
UsageAccumulator resolves "today" in the family's timezone and exposes the
operations playback clients and the dashboard call.
"""

import math
import numbers
import time
from datetime import date, timedelta
from typing import Any, List, Optional

from ...core.clock import Clock, SystemClock, day_string, local_now, resolve_zone
from ...core.database.connection_pool import SQLiteConnectionPool
from ...core.exceptions import InvalidArgumentError, handle_storage_error
from ...core.logging import get_logger
from .profile_store import ProfileSource
from .types import DailyUsageRecord, UsageToday

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS daily_usage (
    kid_profile_id TEXT NOT NULL,
    date TEXT NOT NULL,
    total_minutes_used REAL NOT NULL DEFAULT 0,
    last_updated_at REAL,
    PRIMARY KEY (kid_profile_id, date)
)
"""


def _row_to_record(row: Any) -> DailyUsageRecord:
    return DailyUsageRecord(
        kid_profile_id=row["kid_profile_id"],
        date=row["date"],
        total_minutes_used=row["total_minutes_used"],
        last_updated_at=row["last_updated_at"],
    )


class UsageStore:
    """Durable daily usage counters keyed by (kid_profile_id, date)."""

    def __init__(self, pool: SQLiteConnectionPool):
        self.pool = pool
        self._create_schema()

    @handle_storage_error
    def _create_schema(self) -> None:
        with self.pool.transaction() as conn:
            conn.execute(SCHEMA)

    @handle_storage_error
    def increment(
        self, kid_profile_id: str, day: str, minutes: float, at: float
    ) -> float:
        """Add ``minutes`` to the (kid, day) counter, creating it if needed.

        Returns the new total. The read and the write happen under the
        database write lock, so concurrent increments are never lost.
        """
        with self.pool.transaction(immediate=True) as conn:
            row = conn.execute(
                "SELECT total_minutes_used FROM daily_usage "
                "WHERE kid_profile_id = ? AND date = ?",
                (kid_profile_id, day),
            ).fetchone()

            if row is None:
                total = minutes
                conn.execute(
                    "INSERT INTO daily_usage "
                    "(kid_profile_id, date, total_minutes_used, last_updated_at) "
                    "VALUES (?, ?, ?, ?)",
                    (kid_profile_id, day, total, at),
                )
            else:
                total = row["total_minutes_used"] + minutes
                conn.execute(
                    "UPDATE daily_usage SET total_minutes_used = ?, last_updated_at = ? "
                    "WHERE kid_profile_id = ? AND date = ?",
                    (total, at, kid_profile_id, day),
                )
        return total

    @handle_storage_error
    def get(self, kid_profile_id: str, day: str) -> Optional[DailyUsageRecord]:
        with self.pool.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM daily_usage WHERE kid_profile_id = ? AND date = ?",
                (kid_profile_id, day),
            ).fetchone()
        return _row_to_record(row) if row else None

    @handle_storage_error
    def reset(self, kid_profile_id: str, day: str, at: float) -> bool:
        """Zero an existing counter. Returns False when there was none."""
        with self.pool.transaction(immediate=True) as conn:
            cursor = conn.execute(
                "UPDATE daily_usage SET total_minutes_used = 0, last_updated_at = ? "
                "WHERE kid_profile_id = ? AND date = ?",
                (at, kid_profile_id, day),
            )
            return cursor.rowcount > 0

    @handle_storage_error
    def history(self, kid_profile_id: str, since_day: str) -> List[DailyUsageRecord]:
        """Records with ``date >= since_day``, newest first."""
        with self.pool.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM daily_usage WHERE kid_profile_id = ? AND date >= ? "
                "ORDER BY date DESC",
                (kid_profile_id, since_day),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def close(self) -> None:
        self.pool.close_all()


def validate_minutes(minutes: Any) -> float:
    """Minutes must be a positive, finite real number."""
    if isinstance(minutes, bool) or not isinstance(minutes, numbers.Real):
        raise InvalidArgumentError(
            f"minutes must be a number, got {type(minutes).__name__}",
            details={"minutes": repr(minutes)},
            component="UsageAccumulator",
        )
    if not math.isfinite(minutes) or minutes <= 0:
        raise InvalidArgumentError(
            f"minutes must be a positive finite number, got {minutes}",
            details={"minutes": repr(minutes)},
            component="UsageAccumulator",
        )
    return minutes


def validate_days(days: Any) -> int:
    if isinstance(days, bool) or not isinstance(days, int) or days < 0:
        raise InvalidArgumentError(
            f"days must be a non-negative integer, got {days!r}",
            details={"days": repr(days)},
            component="UsageAccumulator",
        )
    return days


class UsageAccumulator:
    """Records elapsed minutes against each kid's counter for today."""

    def __init__(
        self,
        store: UsageStore,
        profiles: ProfileSource,
        clock: Optional[Clock] = None,
        default_timezone: str = "UTC",
    ):
        self.store = store
        self.profiles = profiles
        self.clock = clock or SystemClock()
        self.default_timezone = default_timezone

    def _local_date(self, kid_profile_id: str) -> date:
        """Calendar day in the owning account's zone; raises if the kid is unknown."""
        profile = self.profiles.get_profile(kid_profile_id)
        zone = resolve_zone(
            self.profiles.get_timezone(profile.user_id), self.default_timezone
        )
        return local_now(self.clock, zone).date()

    def _today(self, kid_profile_id: str) -> str:
        return day_string(self._local_date(kid_profile_id))

    def add_usage(self, kid_profile_id: str, minutes: float) -> float:
        """Add elapsed minutes to today's counter and return today's total."""
        minutes = validate_minutes(minutes)
        today = self._today(kid_profile_id)

        total = self.store.increment(kid_profile_id, today, minutes, time.time())
        logger.debug(
            "Recorded usage",
            kid_profile_id=kid_profile_id,
            date=today,
            minutes=minutes,
            total_minutes_used=total,
        )
        return total

    def get_usage_today(self, kid_profile_id: str) -> UsageToday:
        today = self._today(kid_profile_id)
        record = self.store.get(kid_profile_id, today)
        if record is None:
            return UsageToday(date=today)
        return UsageToday(
            date=today,
            total_minutes_used=record.total_minutes_used,
            last_updated_at=record.last_updated_at,
        )

    def used_minutes(self, kid_profile_id: str, day: str) -> float:
        """Minutes recorded on ``day``; 0 when nothing has been recorded."""
        record = self.store.get(kid_profile_id, day)
        return record.total_minutes_used if record else 0

    def reset_daily_usage(self, kid_profile_id: str) -> None:
        """Zero today's counter. Does nothing when no usage was recorded today."""
        today = self._today(kid_profile_id)
        if self.store.reset(kid_profile_id, today, time.time()):
            logger.info("Reset daily usage", kid_profile_id=kid_profile_id, date=today)

    def get_usage_history(
        self, kid_profile_id: str, days: int
    ) -> List[DailyUsageRecord]:
        """Records from the last ``days`` days (plus today), newest first."""
        days = validate_days(days)
        cutoff = self._local_date(kid_profile_id) - timedelta(days=days)
        return self.store.history(kid_profile_id, day_string(cutoff))
