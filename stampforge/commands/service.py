"""Platform-neutral handling of ``/stamp`` subcommands."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import AbstractSet

from . import messages
from ..domain.cards import CardCatalog
from ..domain.events import COMMUNITY_RESET, STAMPS_ADJUSTED, STAMPS_RESET, EventBus
from ..domain.exceptions import (
    InvalidCardError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from ..domain.leaderboard import LeaderboardRanker
from ..domain.notifications import CompletionNotice, NotificationChannel, TranscriptEntry
from ..domain.permissions import ActorCapabilities, can_manage, can_reset_all
from ..domain.progress import ProgressEngine
from ..domain.rewards import RewardSync
from ..rendering.renderer import CardRenderer
from ..storage.base import AuditStore

logger = logging.getLogger(__name__)


class Subcommand(str, Enum):
    VIEW = "view"
    LEADERBOARD = "leaderboard"
    SETCARD = "setcard"
    ADD = "add"
    REMOVE = "remove"
    RESET = "reset"
    RESETALL = "resetall"


MANAGED = {Subcommand.ADD, Subcommand.REMOVE, Subcommand.RESET}


@dataclass(slots=True, frozen=True)
class MemberRef:
    user_id: str
    display_name: str


@dataclass(slots=True)
class StampRequest:
    """A validated command invocation delivered by a dispatcher."""

    community_id: str
    subcommand: Subcommand
    actor: ActorCapabilities
    actor_name: str
    target: MemberRef | None = None
    amount: int | None = None
    card_id: str | None = None
    community_name: str | None = None


@dataclass(slots=True)
class CommandResult:
    message: str
    image: bytes | None = None
    ephemeral: bool = False


class StampCommandService:
    """Run stamp subcommands and translate domain errors into replies."""

    def __init__(
        self,
        engine: ProgressEngine,
        catalog: CardCatalog,
        renderer: CardRenderer,
        ranker: LeaderboardRanker,
        *,
        reward_sync: RewardSync,
        notifications: NotificationChannel,
        audit_store: AuditStore,
        event_bus: EventBus,
        manager_role_ids: AbstractSet[str] = frozenset(),
        leaderboard_size: int = 10,
        audit_enabled: bool = True,
    ) -> None:
        self._engine = engine
        self._catalog = catalog
        self._renderer = renderer
        self._ranker = ranker
        self._rewards = reward_sync
        self._notifications = notifications
        self._audit_store = audit_store
        self._events = event_bus
        self._manager_roles = frozenset(manager_role_ids)
        self._leaderboard_size = leaderboard_size
        self._audit_enabled = audit_enabled

    async def handle(self, request: StampRequest) -> CommandResult:
        try:
            return await self._dispatch(request)
        except PermissionDenied as exc:
            if exc.action == Subcommand.RESETALL.value:
                return CommandResult(messages.RESET_ALL_FORBIDDEN, ephemeral=True)
            return CommandResult(messages.NO_PERMISSION, ephemeral=True)
        except InvalidCardError:
            if request.subcommand is Subcommand.VIEW:
                return CommandResult(messages.OWN_CARD_INVALID, ephemeral=True)
            return CommandResult(messages.TARGET_CARD_INVALID, ephemeral=True)
        except NotFoundError:
            return CommandResult(messages.MEMBER_NOT_FOUND, ephemeral=True)
        except ValidationError:
            if request.subcommand is Subcommand.SETCARD:
                return CommandResult(messages.UNKNOWN_CARD_CHOICE, ephemeral=True)
            return CommandResult(messages.INVALID_AMOUNT, ephemeral=True)
        except Exception:
            logger.exception(
                "Stamp command '%s' failed in community %s",
                request.subcommand.value,
                request.community_id,
            )
            return CommandResult(messages.GENERIC_FAILURE, ephemeral=True)

    async def _dispatch(self, request: StampRequest) -> CommandResult:
        sub = request.subcommand
        if sub is Subcommand.LEADERBOARD:
            return await self._leaderboard(request)
        if sub is Subcommand.SETCARD:
            return await self._set_card(request)
        if sub is Subcommand.VIEW:
            return await self._view(request)
        if sub is Subcommand.RESETALL:
            return await self._reset_all(request)
        if sub in MANAGED:
            return await self._manage(request)
        return CommandResult(messages.UNKNOWN_SUBCOMMAND, ephemeral=True)

    async def _leaderboard(self, request: StampRequest) -> CommandResult:
        entries = await self._ranker.top(request.community_id, self._leaderboard_size)
        if not entries:
            return CommandResult(messages.LEADERBOARD_EMPTY, ephemeral=True)
        return CommandResult(messages.format_leaderboard(entries, self._engine.goal))

    async def _set_card(self, request: StampRequest) -> CommandResult:
        card_id = request.card_id or ""
        await self._engine.select_card(request.community_id, request.actor.user_id, card_id)
        name = self._catalog.lookup(card_id).name
        return CommandResult(messages.format_card_saved(name), ephemeral=True)

    async def _view(self, request: StampRequest) -> CommandResult:
        target = request.target or MemberRef(request.actor.user_id, request.actor_name)
        progress = await self._engine.view(request.community_id, target.user_id)
        image = await self._render(progress.card_id, progress.count)
        name = self._catalog.lookup(progress.card_id).name
        return CommandResult(
            messages.format_progress(target.display_name, name, progress.count, self._engine.goal),
            image=image,
        )

    async def _reset_all(self, request: StampRequest) -> CommandResult:
        if not can_reset_all(request.actor):
            raise PermissionDenied(Subcommand.RESETALL.value)
        await self._engine.reset_all(request.community_id)
        await self._audit("reset_all", request, {})
        await self._publish(COMMUNITY_RESET, {"community_id": request.community_id})
        await self._send_transcript(
            request.community_id,
            TranscriptEntry(
                actor=request.actor_name,
                action="RESET ALL",
                community_name=request.community_name,
            ),
        )
        return CommandResult(messages.RESET_ALL_DONE)

    async def _manage(self, request: StampRequest) -> CommandResult:
        if not can_manage(request.actor, self._manager_roles):
            raise PermissionDenied(request.subcommand.value)
        target = request.target
        if target is None:
            raise NotFoundError("Target member could not be resolved")

        community_id = request.community_id
        card_id = await self._engine.resolve_card(community_id, target.user_id)
        card_name = self._catalog.lookup(card_id).name
        goal = self._engine.goal

        if request.subcommand is Subcommand.RESET:
            previous = await self._engine.reset(community_id, target.user_id, card_id)
            await self._sync_reward(community_id, target.user_id, self._engine.reward_eligible(0))
            await self._audit("reset", request, {"card_id": card_id, "previous": previous})
            await self._publish(
                STAMPS_RESET,
                {"community_id": community_id, "user_id": target.user_id, "card_id": card_id, "previous": previous},
            )
            await self._send_transcript(
                community_id,
                TranscriptEntry(
                    actor=request.actor_name,
                    target=target.display_name,
                    action=messages.describe_reset(previous),
                    resulting_count=0,
                    goal=goal,
                    card_name=card_name,
                    image=await self._render_quietly(card_id, 0),
                ),
            )
            return CommandResult(messages.format_reset(target.display_name, card_name, goal))

        is_addition = request.subcommand is Subcommand.ADD
        amount = 1 if request.amount is None else request.amount
        outcome = await self._engine.adjust(
            community_id, target.user_id, card_id, amount, is_addition=is_addition
        )

        if outcome.crossed_upward:
            await self._send_completion(
                community_id,
                CompletionNotice(
                    actor=request.actor_name,
                    target=target.display_name,
                    count=outcome.next,
                    goal=goal,
                    card_name=card_name,
                    image=await self._render_quietly(card_id, outcome.next),
                ),
            )
        await self._sync_reward(community_id, target.user_id, self._engine.reward_eligible(outcome.next))
        await self._audit(
            request.subcommand.value,
            request,
            {"card_id": card_id, "amount": amount, "previous": outcome.previous, "next": outcome.next},
        )
        await self._publish(
            STAMPS_ADJUSTED,
            {
                "community_id": community_id,
                "user_id": target.user_id,
                "card_id": card_id,
                "previous": outcome.previous,
                "next": outcome.next,
                "crossed_upward": outcome.crossed_upward,
                "crossed_downward": outcome.crossed_downward,
            },
        )
        await self._send_transcript(
            community_id,
            TranscriptEntry(
                actor=request.actor_name,
                target=target.display_name,
                action=messages.describe_adjustment(is_addition, amount, outcome.previous, outcome.next),
                resulting_count=outcome.next,
                goal=goal,
                card_name=card_name,
                image=await self._render_quietly(card_id, outcome.next),
            ),
        )
        return CommandResult(messages.format_adjusted(target.display_name, card_name, outcome.next, goal))

    async def _render(self, card_id: str, count: int) -> bytes:
        return await asyncio.to_thread(self._renderer.render_card, card_id, count)

    async def _render_quietly(self, card_id: str, count: int) -> bytes | None:
        try:
            return await self._render(card_id, count)
        except Exception as exc:
            logger.warning("Notification image for card %s omitted: %s", card_id, exc)
            return None

    async def _sync_reward(self, community_id: str, user_id: str, eligible: bool) -> None:
        try:
            await self._rewards.sync(community_id, user_id, eligible)
        except Exception:
            logger.exception("Reward sync failed for user %s in community %s", user_id, community_id)

    async def _publish(self, event_name: str, payload: dict) -> None:
        try:
            await self._events.publish(event_name, payload)
        except Exception:
            logger.exception("Event listener for '%s' failed", event_name)

    async def _send_transcript(self, community_id: str, entry: TranscriptEntry) -> None:
        try:
            await self._notifications.send_transcript(community_id, entry)
        except Exception:
            logger.exception("Failed to deliver stamp transcript for community %s", community_id)

    async def _send_completion(self, community_id: str, notice: CompletionNotice) -> None:
        try:
            await self._notifications.send_completion(community_id, notice)
        except Exception:
            logger.exception("Failed to deliver completion notice for community %s", community_id)

    async def _audit(self, action: str, request: StampRequest, payload: dict) -> None:
        if not self._audit_enabled:
            return
        try:
            await self._audit_store.add_entry(
                action,
                {
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "community_id": request.community_id,
                    "actor_id": request.actor.user_id,
                    "target_id": request.target.user_id if request.target else None,
                    **payload,
                },
            )
        except Exception:
            logger.exception("Failed to write audit entry '%s'", action)
