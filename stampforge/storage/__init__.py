"""Storage backends for StampForge."""

from .base import AuditStore, KeyedLocks, LeaderboardRow, ProgressStore, StampRecord
from .memory import InMemoryAuditStore, InMemoryProgressStore
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "AuditStore",
    "KeyedLocks",
    "LeaderboardRow",
    "ProgressStore",
    "StampRecord",
    "InMemoryAuditStore",
    "InMemoryProgressStore",
    "AsyncSQLAlchemyStorage",
]
