"""Resolve Telegram members for leaderboard output."""

from __future__ import annotations

from aiogram import Bot
from aiogram.enums import ChatMemberStatus

from ..domain.leaderboard import DirectoryLookup
from .api_utils import safe_api_call
from .filters import display_name

DEPARTED = {ChatMemberStatus.LEFT, ChatMemberStatus.KICKED}


class TelegramDirectoryLookup(DirectoryLookup):
    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def display_name(self, community_id: str, user_id: str) -> str | None:
        member = await safe_api_call(
            "bot.get_chat_member", self._bot.get_chat_member, int(community_id), int(user_id)
        )
        if member is None or member.status in DEPARTED:
            return None
        return display_name(member.user)
