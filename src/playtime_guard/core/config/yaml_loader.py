"""
Centralized YAML configuration loading utilities.

Provides consistent YAML loading with error handling and logging.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class YAMLConfigLoader:
    """Centralized YAML configuration loader with consistent error handling."""

    @staticmethod
    def load_yaml(path: Path) -> Dict[str, Any]:
        """
        Load YAML file with consistent error handling and logging.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary containing YAML data, empty dict if file is empty

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If YAML parsing fails or the top level is not a mapping
        """
        if not path.exists():
            raise FileNotFoundError(f"YAML file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML file {path}: {e}")
            raise ConfigurationError(
                f"Invalid YAML in {path}: {e}", component="YAMLConfigLoader"
            ) from e

        if data is None:
            logger.warning(f"YAML file is empty or contains only comments: {path}")
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at the top level of {path}",
                component="YAMLConfigLoader",
            )

        logger.debug(f"Successfully loaded YAML from {path}")
        return data

    @staticmethod
    def save_yaml(data: Dict[str, Any], path: Path) -> None:
        """
        Save data to YAML file with consistent formatting.

        Args:
            data: Dictionary to save
            path: Path to save YAML file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.debug(f"Successfully saved YAML to {path}")
