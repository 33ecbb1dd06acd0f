"""
Feature web API endpoints.

Contains the time controls API endpoints.
"""

from .time_controls_api import get_time_control_service
from .time_controls_api import router as time_controls_router

__all__ = [
    "get_time_control_service",
    "time_controls_router",
]
