"""Leaderboard ranking over stored progress."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from .cards import CardCatalog
from ..storage.base import ProgressStore

logger = logging.getLogger(__name__)

UNKNOWN_CARD_NAME = "Unknown Card"


class DirectoryLookup(Protocol):
    async def display_name(self, community_id: str, user_id: str) -> str | None:
        """Return a printable identity, or ``None`` when the member is gone."""
        ...


@dataclass(slots=True, frozen=True)
class LeaderboardEntry:
    rank: int
    user_id: str
    display_name: str
    card_id: str
    card_name: str
    count: int


class LeaderboardRanker:
    """Produce the visible top-N page of a community leaderboard.

    The limit is applied by the store before members are resolved, so rows
    dropped by a failed lookup are not back-filled and a page may come out
    shorter than ``limit``.
    """

    def __init__(self, store: ProgressStore, catalog: CardCatalog, directory: DirectoryLookup) -> None:
        self._store = store
        self._catalog = catalog
        self._directory = directory

    async def top(self, community_id: str, limit: int = 10) -> Sequence[LeaderboardEntry]:
        rows = await self._store.list_top(community_id, limit)
        entries: list[LeaderboardEntry] = []
        for row in rows:
            try:
                name = await self._directory.display_name(community_id, row.user_id)
            except Exception as exc:
                logger.info("Skipping leaderboard row for %s: lookup failed (%s)", row.user_id, exc)
                continue
            if not name:
                continue
            card_name = (
                self._catalog.lookup(row.card_id).name
                if row.card_id in self._catalog
                else UNKNOWN_CARD_NAME
            )
            entries.append(
                LeaderboardEntry(
                    rank=len(entries) + 1,
                    user_id=row.user_id,
                    display_name=name,
                    card_id=row.card_id,
                    card_name=card_name,
                    count=row.count,
                )
            )
        return entries


class IdentityDirectory(DirectoryLookup):
    """Show raw user ids; used when no chat transport is attached."""

    async def display_name(self, community_id: str, user_id: str) -> str | None:
        return user_id
