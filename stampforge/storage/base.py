"""Storage abstractions used by the StampForge services."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Callable, DefaultDict, Hashable, Protocol, Sequence

CountTransform = Callable[[int], int]


@dataclass(slots=True)
class StampRecord:
    community_id: str
    user_id: str
    card_id: str
    count: int
    updated_at: datetime


@dataclass(slots=True)
class LeaderboardRow:
    user_id: str
    card_id: str
    count: int
    updated_at: datetime


class ProgressStore(Protocol):
    async def get_count(self, community_id: str, user_id: str, card_id: str) -> int:
        ...

    async def set_count(
        self, community_id: str, user_id: str, card_id: str, count: int, timestamp: datetime
    ) -> None:
        ...

    async def update_count(
        self,
        community_id: str,
        user_id: str,
        card_id: str,
        transform: CountTransform,
        timestamp: datetime,
    ) -> tuple[int, int]:
        """Apply ``transform`` to the stored count and persist the result.

        Returns ``(previous, next)``. Concurrent updates of the same key are
        serialized so that no update is lost.
        """
        ...

    async def pop_count(self, community_id: str, user_id: str, card_id: str) -> int:
        """Delete a record and return the count it held, as one atomic step per key."""
        ...

    async def list_top(self, community_id: str, limit: int) -> Sequence[LeaderboardRow]:
        ...

    async def reset_community(self, community_id: str) -> None:
        ...

    async def get_selection(self, community_id: str, user_id: str) -> str | None:
        ...

    async def set_selection(self, community_id: str, user_id: str, card_id: str) -> None:
        ...


class AuditStore(Protocol):
    async def add_entry(self, action: str, payload: dict) -> None:
        ...


class KeyedLocks:
    """Hand out one ``asyncio.Lock`` per key, dropping it once unused."""

    def __init__(self) -> None:
        self._locks: DefaultDict[Hashable, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._waiters: DefaultDict[Hashable, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks[key]
        self._waiters[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]
