"""Stamp progress state machine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from .cards import CardCatalog
from .exceptions import InvalidCardError, ValidationError
from ..storage.base import ProgressStore

Clock = Callable[[], datetime]

DEFAULT_CARD_ID = "og"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, frozen=True)
class ProgressView:
    card_id: str
    count: int


@dataclass(slots=True, frozen=True)
class Adjustment:
    """Outcome of a single add/remove step."""

    previous: int
    next: int
    crossed_upward: bool
    crossed_downward: bool


class ProgressEngine:
    """Apply stamp additions, removals and resets against a ``ProgressStore``.

    The engine only returns data. Rendering, reward markers and notifications
    are left to the caller.
    """

    def __init__(
        self,
        store: ProgressStore,
        catalog: CardCatalog,
        *,
        goal: int = 10,
        default_card: str = DEFAULT_CARD_ID,
        clock: Clock | None = None,
    ) -> None:
        if goal <= 0:
            raise ValueError("Stamp goal must be positive")
        self._store = store
        self._catalog = catalog
        self._goal = goal
        self._default_card = default_card
        self._clock = clock or utcnow

    @property
    def goal(self) -> int:
        return self._goal

    async def resolve_card(self, community_id: str, user_id: str) -> str:
        card_id = await self._store.get_selection(community_id, user_id) or self._default_card
        if card_id not in self._catalog:
            raise InvalidCardError(card_id)
        return card_id

    async def view(self, community_id: str, user_id: str) -> ProgressView:
        card_id = await self.resolve_card(community_id, user_id)
        count = await self._store.get_count(community_id, user_id, card_id)
        return ProgressView(card_id=card_id, count=count)

    async def select_card(self, community_id: str, user_id: str, card_id: str) -> None:
        if card_id not in self._catalog:
            raise ValidationError(f"Unknown card choice '{card_id}'")
        await self._store.set_selection(community_id, user_id, card_id)

    async def adjust(
        self,
        community_id: str,
        user_id: str,
        card_id: str,
        amount: int,
        *,
        is_addition: bool,
    ) -> Adjustment:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Amount must be a positive integer")

        def apply(current: int) -> int:
            if is_addition:
                return current + amount
            return max(0, current - amount)

        previous, next_count = await self._store.update_count(
            community_id, user_id, card_id, apply, self._clock()
        )
        return Adjustment(
            previous=previous,
            next=next_count,
            crossed_upward=is_addition and previous < self._goal <= next_count,
            crossed_downward=not is_addition and previous >= self._goal > next_count,
        )

    async def reset(self, community_id: str, user_id: str, card_id: str) -> int:
        return await self._store.pop_count(community_id, user_id, card_id)

    async def reset_all(self, community_id: str) -> None:
        await self._store.reset_community(community_id)

    def reward_eligible(self, count: int) -> bool:
        return count >= self._goal
