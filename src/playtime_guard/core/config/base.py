"""
Base configuration infrastructure for Playtime Guard.

Contains shared constants and the Environment enum.
"""

from enum import Enum

# Zone used when a parent account has no timezone of its own
DEFAULT_TIMEZONE = "UTC"

# Prefix for environment variable overrides (PTG_SECTION__FIELD)
ENV_PREFIX = "PTG_"


class Environment(Enum):
    """Environment types for configuration."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
