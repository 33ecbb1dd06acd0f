"""
Playtime Guard: time-based access control for kid profiles.
"""

__version__ = "0.1.0"
