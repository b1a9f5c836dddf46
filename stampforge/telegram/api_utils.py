"""Shared helpers to interact with the Telegram Bot API safely."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from aiogram import Bot
from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramRetryAfter,
)
from aiogram.types import BufferedInputFile, Message

from ..commands.service import CommandResult

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)

CARD_FILENAME = "stamp-card.png"
CAPTION_LIMIT = 1024


async def safe_api_call(
    label: str,
    func: Callable[P, Awaitable[T]],
    *args: P.args,
    retries: int = 3,
    **kwargs: P.kwargs,
) -> T | None:
    """Execute a Telegram API call, waiting out rate limits and logging failures.

    Returns ``None`` when the call could not be completed.
    """
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except TelegramRetryAfter as exc:
            attempt += 1
            if attempt >= retries:
                logger.warning(
                    "Telegram call '%s' exceeded retry limit (%s attempts, retry_after=%s).",
                    label,
                    attempt,
                    getattr(exc, "retry_after", None),
                )
                return None
            delay = float(getattr(exc, "retry_after", 0) or 1.0)
            logger.info(
                "Telegram call '%s' hit rate limit; sleeping for %.1f s (attempt %s/%s).",
                label,
                delay,
                attempt,
                retries,
            )
            await asyncio.sleep(delay)
        except TelegramForbiddenError:
            logger.info("Telegram call '%s' forbidden (bot removed or blocked).", label)
            return None
        except TelegramBadRequest as exc:
            logger.warning("Telegram call '%s' bad request: %s", label, exc)
            return None
        except TelegramAPIError as exc:
            logger.error("Telegram call '%s' failed: %s", label, exc, exc_info=True)
            return None


async def safe_send_result(message: Message | None, result: CommandResult) -> bool:
    """Deliver a command result; ephemeral results are sent as a reply to the invoker."""
    if not message:
        return False
    if result.image is not None:
        photo = BufferedInputFile(result.image, filename=CARD_FILENAME)
        send = message.reply_photo if result.ephemeral else message.answer_photo
        sent = await safe_api_call(
            "message.photo", send, photo, caption=result.message[:CAPTION_LIMIT]
        )
    else:
        send = message.reply if result.ephemeral else message.answer
        sent = await safe_api_call("message.text", send, result.message)
    return sent is not None


async def safe_send_to_chat(
    bot: Bot,
    chat_id: int,
    text: str,
    *,
    image: bytes | None = None,
    filename: str = CARD_FILENAME,
) -> bool:
    """Post text, or a photo captioned with text, to an arbitrary chat."""
    if image is not None:
        sent = await safe_api_call(
            "bot.send_photo",
            bot.send_photo,
            chat_id,
            BufferedInputFile(image, filename=filename),
            caption=text[:CAPTION_LIMIT],
        )
    else:
        sent = await safe_api_call("bot.send_message", bot.send_message, chat_id, text)
    return sent is not None
