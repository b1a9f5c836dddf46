"""Deliver stamp transcripts and completion posts to Telegram chats."""

from __future__ import annotations

from aiogram import Bot

from ..commands.messages import format_completion, format_transcript
from ..domain.notifications import CompletionNotice, NotificationChannel, TranscriptEntry
from .api_utils import safe_send_to_chat


class TelegramNotificationChannel(NotificationChannel):
    """Post to the configured log and completion chats; unset chats are skipped."""

    def __init__(
        self,
        bot: Bot,
        *,
        log_chat_id: int | None = None,
        completed_chat_id: int | None = None,
    ) -> None:
        self._bot = bot
        self._log_chat_id = log_chat_id
        self._completed_chat_id = completed_chat_id

    async def send_transcript(self, community_id: str, entry: TranscriptEntry) -> None:
        if self._log_chat_id is None:
            return
        await safe_send_to_chat(
            self._bot, self._log_chat_id, format_transcript(entry), image=entry.image
        )

    async def send_completion(self, community_id: str, notice: CompletionNotice) -> None:
        if self._completed_chat_id is None:
            return
        await safe_send_to_chat(
            self._bot,
            self._completed_chat_id,
            format_completion(notice),
            image=notice.image,
            filename="completed-stamp-card.png",
        )
