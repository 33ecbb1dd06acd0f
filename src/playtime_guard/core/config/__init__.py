"""
Configuration management for Playtime Guard.

Provides a clean public API for all configuration components.
"""

# Base infrastructure
from .base import DEFAULT_TIMEZONE, Environment

# Main configuration class
from .main import Config

# Runtime configuration
from .runtime import APIConfig, MonitoringConfig, StorageConfig, TimeControlsConfig
from .yaml_loader import YAMLConfigLoader

# Public API
__all__ = [
    # Main class
    "Config",
    # Base
    "Environment",
    "DEFAULT_TIMEZONE",
    # Runtime
    "APIConfig",
    "MonitoringConfig",
    "StorageConfig",
    "TimeControlsConfig",
    # Loading
    "YAMLConfigLoader",
]
