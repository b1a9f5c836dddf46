"""Reward marker synchronisation."""

from __future__ import annotations

from typing import Protocol

from .events import REWARD_GRANTED, REWARD_REVOKED, EventBus


class RewardSync(Protocol):
    async def sync(self, community_id: str, user_id: str, eligible: bool) -> None:
        """Grant or revoke the reward marker. Must be a no-op when already in sync."""
        ...


class InMemoryRewardSync(RewardSync):
    """Track reward holders in memory and announce state changes on the event bus."""

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._events = event_bus or EventBus()
        self._holders: set[tuple[str, str]] = set()

    async def sync(self, community_id: str, user_id: str, eligible: bool) -> None:
        key = (community_id, user_id)
        if eligible == (key in self._holders):
            return
        if eligible:
            self._holders.add(key)
            await self._events.publish(REWARD_GRANTED, {"community_id": community_id, "user_id": user_id})
        else:
            self._holders.discard(key)
            await self._events.publish(REWARD_REVOKED, {"community_id": community_id, "user_id": user_id})

    def holds_reward(self, community_id: str, user_id: str) -> bool:
        return (community_id, user_id) in self._holders
