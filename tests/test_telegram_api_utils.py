from unittest.mock import AsyncMock

import pytest
from aiogram.exceptions import TelegramForbiddenError, TelegramRetryAfter
from aiogram.types import BufferedInputFile

from stampforge.commands.service import CommandResult
from stampforge.telegram.api_utils import CAPTION_LIMIT, safe_api_call, safe_send_result


class DummyForbidden(TelegramForbiddenError):
    def __init__(self) -> None:
        Exception.__init__(self, "forbidden")


class DummyRetryAfter(TelegramRetryAfter):
    def __init__(self, retry_after: float) -> None:
        Exception.__init__(self, f"retry after {retry_after}")
        self.retry_after = retry_after


@pytest.mark.asyncio()
async def test_safe_api_call_returns_result():
    async def ok() -> int:
        return 42

    result = await safe_api_call("test", ok)
    assert result == 42


@pytest.mark.asyncio()
async def test_safe_api_call_handles_forbidden():
    async def forbidden() -> None:
        raise DummyForbidden()

    result = await safe_api_call("forbidden", forbidden)
    assert result is None


@pytest.mark.asyncio()
async def test_safe_api_call_retries_on_retry_after(monkeypatch):
    mock_call = AsyncMock(side_effect=[DummyRetryAfter(0.0), 7])

    async def fake_sleep(delay: float) -> None:
        assert delay >= 0.0

    monkeypatch.setattr("stampforge.telegram.api_utils.asyncio.sleep", fake_sleep)

    result = await safe_api_call("retry", mock_call, retries=2)
    assert result == 7
    assert mock_call.await_count == 2


@pytest.mark.asyncio()
async def test_safe_send_result_replies_for_ephemeral_text():
    message = AsyncMock()

    assert await safe_send_result(message, CommandResult("nope", ephemeral=True))

    message.reply.assert_awaited_once_with("nope")
    message.answer.assert_not_awaited()


@pytest.mark.asyncio()
async def test_safe_send_result_sends_photo_with_trimmed_caption():
    message = AsyncMock()

    await safe_send_result(message, CommandResult("x" * 2000, image=b"png"))

    args, kwargs = message.answer_photo.await_args
    assert isinstance(args[0], BufferedInputFile)
    assert len(kwargs["caption"]) == CAPTION_LIMIT


@pytest.mark.asyncio()
async def test_safe_send_result_without_message():
    assert await safe_send_result(None, CommandResult("hi")) is False
