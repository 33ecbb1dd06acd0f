"""
Pytest configuration and fixtures for Playtime Guard.
"""

import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import pytest

from playtime_guard.core.clock import FixedClock
from playtime_guard.core.config import Config, Environment, StorageConfig
from playtime_guard.features.time_controls import (
    KidProfile,
    TimeControlService,
    create_time_control_service,
)

# Tuesday
WEEKDAY_NOON = datetime(2026, 10, 20, 12, 0, tzinfo=timezone.utc)
# Saturday
SATURDAY_NOON = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_profile(kid_profile_id: str = "k1", user_id: str = "u1", **kwargs: Any) -> KidProfile:
    kwargs.setdefault("name", kid_profile_id.upper())
    return KidProfile(id=kid_profile_id, user_id=user_id, **kwargs)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    return Config(
        environment=Environment.TESTING,
        storage=StorageConfig(data_dir=temp_dir / "data"),
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(WEEKDAY_NOON)


@pytest.fixture
def service(test_config: Config, clock: FixedClock) -> Generator[TimeControlService, None, None]:
    svc = create_time_control_service(test_config, clock=clock)
    yield svc
    svc.store.close()
