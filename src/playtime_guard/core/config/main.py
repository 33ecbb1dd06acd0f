"""
Main configuration class for Playtime Guard.

Contains the Config class that orchestrates all configuration components.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ConfigurationError
from .base import DEFAULT_TIMEZONE, ENV_PREFIX, Environment
from .runtime import APIConfig, MonitoringConfig, StorageConfig, TimeControlsConfig
from .yaml_loader import YAMLConfigLoader

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Main configuration class for Playtime Guard."""

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    storage: StorageConfig = field(default_factory=StorageConfig)
    time_controls: TimeControlsConfig = field(default_factory=TimeControlsConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    api: APIConfig = field(default_factory=APIConfig)

    def __post_init__(self) -> None:
        """Validate configuration and apply environment-specific defaults."""
        if self.environment == Environment.PRODUCTION:
            self.debug = False
            self.monitoring.structured_logging = True
        elif self.environment == Environment.TESTING:
            self.debug = True

        try:
            ZoneInfo(self.time_controls.default_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown default timezone: {self.time_controls.default_timezone}",
                component="Config",
            ) from e

        if self.storage.max_connections < 1:
            raise ConfigurationError(
                f"storage.max_connections must be >= 1, got {self.storage.max_connections}",
                component="Config",
            )
        if self.time_controls.history_default_days < 0:
            raise ConfigurationError(
                "time_controls.history_default_days must be >= 0",
                component="Config",
            )

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        data = YAMLConfigLoader.load_yaml(config_path)

        storage_data = dict(data.get("storage", {}) or {})
        if "data_dir" in storage_data:
            storage_data["data_dir"] = Path(storage_data["data_dir"])

        logger.info(f"Loading configuration from {config_path}")
        try:
            return cls(
                environment=Environment(data.get("environment", "development")),
                debug=data.get("debug", False),
                storage=StorageConfig(**storage_data),
                time_controls=TimeControlsConfig(**(data.get("time_controls") or {})),
                monitoring=MonitoringConfig(**(data.get("monitoring") or {})),
                api=APIConfig(**(data.get("api") or {})),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e}", component="Config"
            ) from e

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""

        def getenv_bool(name: str, default: bool) -> bool:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else v.lower() in {"1", "true", "yes", "on"}

        def getenv_int(name: str, default: int) -> int:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else int(v)

        def getenv_float(name: str, default: float) -> float:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else float(v)

        def getenv_str(name: str, default: str) -> str:
            return os.getenv(ENV_PREFIX + name, default)

        defaults = StorageConfig()
        storage = StorageConfig(
            data_dir=Path(getenv_str("STORAGE__DATA_DIR", str(defaults.data_dir))),
            usage_db_name=getenv_str("STORAGE__USAGE_DB_NAME", defaults.usage_db_name),
            profiles_dir_name=getenv_str(
                "STORAGE__PROFILES_DIR_NAME", defaults.profiles_dir_name
            ),
            max_connections=getenv_int(
                "STORAGE__MAX_CONNECTIONS", defaults.max_connections
            ),
            busy_timeout_s=getenv_float(
                "STORAGE__BUSY_TIMEOUT_S", defaults.busy_timeout_s
            ),
            enable_wal_mode=getenv_bool(
                "STORAGE__ENABLE_WAL_MODE", defaults.enable_wal_mode
            ),
        )

        time_controls = TimeControlsConfig(
            default_timezone=getenv_str("TIME_CONTROLS__DEFAULT_TIMEZONE", DEFAULT_TIMEZONE),
            strict_profiles=getenv_bool("TIME_CONTROLS__STRICT_PROFILES", False),
            history_default_days=getenv_int("TIME_CONTROLS__HISTORY_DEFAULT_DAYS", 7),
        )

        monitoring = MonitoringConfig(
            log_level=getenv_str("MONITORING__LOG_LEVEL", "INFO"),
            structured_logging=getenv_bool("MONITORING__STRUCTURED_LOGGING", True),
        )

        api = APIConfig(
            host=getenv_str("API__HOST", "127.0.0.1"),
            port=getenv_int("API__PORT", 8000),
        )

        return cls(
            environment=Environment(getenv_str("ENV", "development")),
            debug=getenv_bool("DEBUG", False),
            storage=storage,
            time_controls=time_controls,
            monitoring=monitoring,
            api=api,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "storage": {
                "data_dir": str(self.storage.data_dir),
                "usage_db_name": self.storage.usage_db_name,
                "profiles_dir_name": self.storage.profiles_dir_name,
                "max_connections": self.storage.max_connections,
                "busy_timeout_s": self.storage.busy_timeout_s,
                "enable_wal_mode": self.storage.enable_wal_mode,
            },
            "time_controls": {
                "default_timezone": self.time_controls.default_timezone,
                "strict_profiles": self.time_controls.strict_profiles,
                "history_default_days": self.time_controls.history_default_days,
            },
            "monitoring": {
                "log_level": self.monitoring.log_level,
                "structured_logging": self.monitoring.structured_logging,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
        }

    def save(self, config_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        YAMLConfigLoader.save_yaml(self.to_dict(), Path(config_path))
