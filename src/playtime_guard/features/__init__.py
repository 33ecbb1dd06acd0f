"""
Features package for Playtime Guard.

Contains the time controls feature: usage accounting, allowed-hours windows,
access decisions and the parent dashboard summary.
"""

from .time_controls import TimeControlService, create_time_control_service

__all__ = [
    "TimeControlService",
    "create_time_control_service",
]
