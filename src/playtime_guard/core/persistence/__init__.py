"""
Persistence utilities for Playtime Guard.

Provides centralized JSON persistence and data manager lifecycle.
"""

from .base_manager import BaseDataManager
from .json_manager import JSONRepository

__all__ = [
    "BaseDataManager",
    "JSONRepository",
]
