"""In-memory storage backend for StampForge."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from typing import Deque, Sequence

from .base import AuditStore, CountTransform, KeyedLocks, LeaderboardRow, ProgressStore, StampRecord

RecordKey = tuple[str, str, str]


class InMemoryProgressStore(ProgressStore):
    def __init__(self) -> None:
        self._records: dict[RecordKey, StampRecord] = {}
        self._selections: dict[tuple[str, str], str] = {}
        self._locks = KeyedLocks()

    async def get_count(self, community_id: str, user_id: str, card_id: str) -> int:
        record = self._records.get((community_id, user_id, card_id))
        return record.count if record else 0

    async def set_count(
        self, community_id: str, user_id: str, card_id: str, count: int, timestamp: datetime
    ) -> None:
        key = (community_id, user_id, card_id)
        async with self._locks.hold(key):
            self._write(key, count, timestamp)

    async def update_count(
        self,
        community_id: str,
        user_id: str,
        card_id: str,
        transform: CountTransform,
        timestamp: datetime,
    ) -> tuple[int, int]:
        key = (community_id, user_id, card_id)
        async with self._locks.hold(key):
            record = self._records.get(key)
            previous = record.count if record else 0
            next_count = transform(previous)
            self._write(key, next_count, timestamp)
            return previous, next_count

    async def pop_count(self, community_id: str, user_id: str, card_id: str) -> int:
        key = (community_id, user_id, card_id)
        async with self._locks.hold(key):
            record = self._records.pop(key, None)
            return record.count if record else 0

    async def list_top(self, community_id: str, limit: int) -> Sequence[LeaderboardRow]:
        rows = [
            LeaderboardRow(
                user_id=record.user_id,
                card_id=record.card_id,
                count=record.count,
                updated_at=record.updated_at,
            )
            for record in self._records.values()
            if record.community_id == community_id
        ]
        rows.sort(key=lambda row: (-row.count, row.updated_at))
        return rows[:limit]

    async def reset_community(self, community_id: str) -> None:
        for key in [key for key in self._records if key[0] == community_id]:
            del self._records[key]

    async def get_selection(self, community_id: str, user_id: str) -> str | None:
        return self._selections.get((community_id, user_id))

    async def set_selection(self, community_id: str, user_id: str, card_id: str) -> None:
        self._selections[(community_id, user_id)] = card_id

    def _write(self, key: RecordKey, count: int, timestamp: datetime) -> None:
        community_id, user_id, card_id = key
        self._records[key] = StampRecord(
            community_id=community_id,
            user_id=user_id,
            card_id=card_id,
            count=count,
            updated_at=timestamp,
        )


class InMemoryAuditStore(AuditStore):
    def __init__(self, *, maxlen: int = 1000) -> None:
        self._entries: Deque[tuple[datetime, str, dict]] = deque(maxlen=maxlen)

    async def add_entry(self, action: str, payload: dict) -> None:
        self._entries.append((datetime.now(timezone.utc), action, payload))

    def dump(self) -> list[tuple[datetime, str, dict]]:
        return list(self._entries)
