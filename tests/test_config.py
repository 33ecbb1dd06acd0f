"""
Tests for configuration management.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from playtime_guard.core.config import Config, Environment, YAMLConfigLoader
from playtime_guard.core.exceptions import ConfigurationError


class TestConfig:
    """Test configuration management."""

    def test_config_default_initialization(self) -> None:
        config = Config()
        assert config.environment == Environment.DEVELOPMENT
        assert config.time_controls.default_timezone == "UTC"
        assert config.time_controls.strict_profiles is False
        assert config.time_controls.history_default_days == 7

    def test_production_disables_debug(self) -> None:
        config = Config(environment=Environment.PRODUCTION, debug=True)
        assert config.debug is False
        assert config.monitoring.structured_logging is True

    def test_testing_enables_debug(self) -> None:
        assert Config(environment=Environment.TESTING).debug is True

    def test_storage_paths(self, temp_dir: Path) -> None:
        config = Config()
        config.storage.data_dir = temp_dir
        assert config.storage.usage_db_path == temp_dir / "usage.db"
        assert config.storage.profiles_dir == temp_dir / "profiles"

    def test_unknown_default_timezone(self) -> None:
        from playtime_guard.core.config import TimeControlsConfig

        with pytest.raises(ConfigurationError):
            Config(time_controls=TimeControlsConfig(default_timezone="Not/AZone"))

    def test_negative_history_days(self) -> None:
        from playtime_guard.core.config import TimeControlsConfig

        with pytest.raises(ConfigurationError):
            Config(time_controls=TimeControlsConfig(history_default_days=-1))


class TestConfigFromEnv:
    """Test environment variable loading."""

    def test_from_env(self, temp_dir: Path) -> None:
        env = {
            "PTG_ENV": "production",
            "PTG_STORAGE__DATA_DIR": str(temp_dir),
            "PTG_STORAGE__MAX_CONNECTIONS": "3",
            "PTG_TIME_CONTROLS__DEFAULT_TIMEZONE": "Europe/Madrid",
            "PTG_TIME_CONTROLS__STRICT_PROFILES": "true",
            "PTG_TIME_CONTROLS__HISTORY_DEFAULT_DAYS": "14",
            "PTG_API__PORT": "9001",
        }
        with patch.dict(os.environ, env):
            config = Config.from_env()

        assert config.environment == Environment.PRODUCTION
        assert config.storage.data_dir == temp_dir
        assert config.storage.max_connections == 3
        assert config.time_controls.default_timezone == "Europe/Madrid"
        assert config.time_controls.strict_profiles is True
        assert config.time_controls.history_default_days == 14
        assert config.api.port == 9001


class TestConfigFiles:
    """Test YAML loading and saving."""

    def test_round_trip(self, temp_dir: Path) -> None:
        config = Config()
        config.storage.data_dir = temp_dir / "data"
        config.time_controls.default_timezone = "America/Chicago"
        path = temp_dir / "config.yaml"

        config.save(path)
        loaded = Config.from_file(path)

        assert loaded.to_dict() == config.to_dict()
        assert loaded.storage.data_dir == temp_dir / "data"

    def test_partial_file_uses_defaults(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({"time_controls": {"strict_profiles": True}}))

        config = Config.from_file(path)
        assert config.time_controls.strict_profiles is True
        assert config.time_controls.default_timezone == "UTC"

    def test_unknown_field(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({"storage": {"no_such_field": 1}}))

        with pytest.raises(ConfigurationError):
            Config.from_file(path)

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Config.from_file(temp_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("storage: [unclosed")

        with pytest.raises(ConfigurationError):
            YAMLConfigLoader.load_yaml(path)

    def test_non_mapping_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            YAMLConfigLoader.load_yaml(path)
