"""
Centralized JSON persistence utilities.

Provides consistent error handling, logging, and atomic writes for the
JSON-backed repositories.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

from ..exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JSONRepository:
    """Centralized JSON persistence with consistent error handling and atomic operations."""

    @staticmethod
    def load_json(
        path: Path, default: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Load JSON data from file with consistent error handling.

        Args:
            path: Path to JSON file
            default: Value to return if the file doesn't exist or holds null

        Returns:
            Dictionary containing JSON data or default value

        Raises:
            StorageError: If the file cannot be read or is not a JSON object.
                Callers must not write over a file that failed to load.
        """
        if default is None:
            default = {}

        if not path.exists():
            logger.debug(f"JSON file does not exist: {path}")
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load JSON file {path}: {e}")
            raise StorageError(
                f"Failed to load JSON file {path}: {e}",
                details={"path": str(path)},
                component="JSONRepository",
            ) from e

        if data is None:
            logger.warning(f"JSON file is empty: {path}")
            return default

        if not isinstance(data, dict):
            logger.error(f"JSON file does not hold an object: {path}")
            raise StorageError(
                f"Expected a JSON object in {path}, got {type(data).__name__}",
                details={"path": str(path)},
                component="JSONRepository",
            )

        logger.debug(f"Successfully loaded JSON from {path}")
        return data

    @staticmethod
    def save_json(path: Path, data: Dict[str, Any]) -> bool:
        """
        Save JSON data atomically: write to a temp file, then replace.

        Args:
            path: Path to save JSON file
            data: Dictionary to save as JSON

        Returns:
            True if successful, False otherwise
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            temp_file = path.with_suffix(".tmp")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_file.replace(path)

            logger.debug(f"Successfully saved JSON to {path}")
            return True

        except OSError as e:
            logger.error(f"Failed to save JSON file {path}: {e}")
            return False

    @staticmethod
    def load_json_objects(
        path: Path,
        from_dict_fn: Callable[[Dict[str, Any]], T],
    ) -> Dict[str, T]:
        """
        Load JSON data and convert to objects using provided conversion function.

        Args:
            path: Path to JSON file
            from_dict_fn: Function to convert dict to object (e.g., KidProfile.from_dict)

        Returns:
            Dictionary of converted objects, in file order
        """
        raw_data = JSONRepository.load_json(path, {})

        objects: Dict[str, T] = {}
        for key, obj_data in raw_data.items():
            if isinstance(obj_data, dict):
                objects[key] = from_dict_fn(obj_data)
            else:
                logger.warning(f"Skipping non-dict value for key '{key}' in {path}")

        logger.debug(f"Loaded {len(objects)} objects from {path}")
        return objects

    @staticmethod
    def save_json_objects(
        path: Path,
        objects: Dict[str, Any],
        to_dict_fn: Callable[[Any], Dict[str, Any]],
    ) -> bool:
        """
        Convert objects to dictionaries and save as JSON.

        Args:
            path: Path to save JSON file
            objects: Dictionary of objects to save
            to_dict_fn: Function to convert object to dict (e.g., lambda p: p.to_dict())

        Returns:
            True if successful, False otherwise
        """
        data = {key: to_dict_fn(obj) for key, obj in objects.items()}
        return JSONRepository.save_json(path, data)
