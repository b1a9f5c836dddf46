"""Reusable aiogram filters for StampForge bots."""

from __future__ import annotations

from aiogram import Bot
from aiogram.enums import ChatMemberStatus, ChatType
from aiogram.filters import BaseFilter
from aiogram.types import Message, User

from ..config import AdminConfig
from ..domain.permissions import ActorCapabilities
from .api_utils import safe_api_call

GROUP_CHATS = {ChatType.GROUP, ChatType.SUPERGROUP}


class CommunityChatFilter(BaseFilter):
    """Only let stamp commands through in group chats."""

    async def __call__(self, message: Message) -> bool:
        return message.chat.type in GROUP_CHATS


class ActorFilter(BaseFilter):
    """Resolve the sender's capabilities and inject them as ``actor``."""

    def __init__(self, admin: AdminConfig) -> None:
        self._admin = admin

    async def __call__(self, message: Message, bot: Bot) -> dict | bool:
        user = message.from_user
        if not user:
            return False
        actor = await resolve_actor(bot, message.chat.id, user, self._admin)
        return {"actor": actor}


async def resolve_actor(bot: Bot, chat_id: int, user: User, admin: AdminConfig) -> ActorCapabilities:
    """Translate Telegram membership into platform-neutral capabilities.

    A Telegram "role" is either the member's own id or an admin custom title,
    so both can be listed among the configured manager roles.
    """
    member = await safe_api_call("bot.get_chat_member", bot.get_chat_member, chat_id, user.id)
    status = member.status if member else None
    roles = {str(user.id)}
    custom_title = getattr(member, "custom_title", None)
    if custom_title:
        roles.add(custom_title)
    return ActorCapabilities(
        user_id=str(user.id),
        is_owner=status == ChatMemberStatus.CREATOR,
        is_admin=status == ChatMemberStatus.ADMINISTRATOR or user.id in admin.admin_ids,
        role_ids=frozenset(roles),
    )


def display_name(user: User) -> str:
    return user.username or user.full_name
