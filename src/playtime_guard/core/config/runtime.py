"""
Runtime configuration for Playtime Guard.

Contains storage, time-control, monitoring and API configuration classes.
"""

from dataclasses import dataclass, field
from pathlib import Path

from .base import DEFAULT_TIMEZONE


@dataclass
class StorageConfig:
    """Durable storage configuration."""

    data_dir: Path = field(default_factory=lambda: Path.cwd() / "data")
    usage_db_name: str = "usage.db"
    profiles_dir_name: str = "profiles"
    max_connections: int = 5
    busy_timeout_s: float = 30.0
    enable_wal_mode: bool = True

    @property
    def usage_db_path(self) -> Path:
        return self.data_dir / self.usage_db_name

    @property
    def profiles_dir(self) -> Path:
        return self.data_dir / self.profiles_dir_name


@dataclass
class TimeControlsConfig:
    """Access-decision behaviour configuration."""

    default_timezone: str = DEFAULT_TIMEZONE
    # Raise on enabled-but-unpopulated profile checks instead of skipping them
    strict_profiles: bool = False
    history_default_days: int = 7


@dataclass
class MonitoringConfig:
    """Logging configuration."""

    log_level: str = "INFO"
    structured_logging: bool = True


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
