"""
Database utilities for Playtime Guard.
"""

from .connection_pool import PoolConfig, SQLiteConnectionPool

__all__ = ["PoolConfig", "SQLiteConnectionPool"]
