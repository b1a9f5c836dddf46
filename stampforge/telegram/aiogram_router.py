"""Factory helpers to wire StampForge services into aiogram."""

from __future__ import annotations

from dataclasses import dataclass

from aiogram import Bot, F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message, User

from ..app import BotApp
from ..commands import messages
from ..commands.service import CommandResult, MemberRef, StampRequest, Subcommand
from ..domain.permissions import ActorCapabilities
from .api_utils import safe_api_call, safe_send_result
from .directory import DEPARTED
from .filters import ActorFilter, CommunityChatFilter, display_name
from .keyboards import SETCARD_PREFIX, card_choice_keyboard

USAGE = "\n".join(
    [
        "🪪 Stamp card commands:",
        "• /stamp view - show your card (reply to someone to see theirs)",
        "• /stamp leaderboard - top stamp holders",
        "• /stamp setcard [card] - choose your card design",
        "• /stamp add [user_id] [amount] - add stamps (reply or id, managers)",
        "• /stamp remove [user_id] [amount] - remove stamps (managers)",
        "• /stamp reset [user_id] - reset a member's card (managers)",
        "• /stamp resetall - reset every card in this chat (owner/admins)",
    ]
)


@dataclass(slots=True)
class ParsedArgs:
    subcommand: str | None
    user_id: int | None = None
    amount: int | None = None
    card_id: str | None = None
    amount_invalid: bool = False


def parse_stamp_args(raw: str | None, *, has_reply_target: bool) -> ParsedArgs:
    """Split ``/stamp`` arguments into subcommand, target id, amount and card.

    Unless the command replies to a member, the first argument of a managed
    subcommand is the target user id.
    """
    parts = (raw or "").split()
    if not parts:
        return ParsedArgs(subcommand=None)
    sub, rest = parts[0].lower(), parts[1:]
    parsed = ParsedArgs(subcommand=sub)

    if sub == Subcommand.SETCARD.value:
        parsed.card_id = rest[0].lower() if rest else None
        return parsed

    if sub in {Subcommand.ADD.value, Subcommand.REMOVE.value, Subcommand.RESET.value, Subcommand.VIEW.value}:
        if not has_reply_target and rest:
            if rest[0].lstrip("-").isdigit():
                parsed.user_id = int(rest[0])
            rest = rest[1:]
        if sub in {Subcommand.ADD.value, Subcommand.REMOVE.value} and rest:
            try:
                parsed.amount = int(rest[0])
            except ValueError:
                parsed.amount_invalid = True
            else:
                parsed.amount_invalid = parsed.amount < 1
    return parsed


def build_router(app: BotApp) -> Router:
    router = Router()
    router.message.filter(CommunityChatFilter())
    service = app.commands

    @router.message(Command("stamp"), ActorFilter(app.config.admin))
    async def handle_stamp(
        message: Message, command: CommandObject, actor: ActorCapabilities, bot: Bot
    ) -> None:
        replied = _replied_user(message)
        parsed = parse_stamp_args(command.args, has_reply_target=replied is not None)
        if parsed.subcommand is None:
            await safe_send_result(message, CommandResult(USAGE, ephemeral=True))
            return
        try:
            subcommand = Subcommand(parsed.subcommand)
        except ValueError:
            await safe_send_result(message, CommandResult(messages.UNKNOWN_SUBCOMMAND, ephemeral=True))
            return
        if parsed.amount_invalid:
            await safe_send_result(message, CommandResult(messages.INVALID_AMOUNT, ephemeral=True))
            return
        if subcommand is Subcommand.SETCARD and parsed.card_id is None:
            await safe_api_call(
                "message.reply",
                message.reply,
                "Which card design?",
                reply_markup=card_choice_keyboard(app.catalog),
            )
            return

        target = None
        if replied is not None:
            target = MemberRef(str(replied.id), display_name(replied))
        elif parsed.user_id is not None:
            target = await _fetch_member(bot, message.chat.id, parsed.user_id)
            if target is None and subcommand is Subcommand.VIEW:
                await safe_send_result(message, CommandResult(messages.MEMBER_NOT_FOUND, ephemeral=True))
                return

        request = StampRequest(
            community_id=str(message.chat.id),
            subcommand=subcommand,
            actor=actor,
            actor_name=display_name(message.from_user),
            target=target,
            amount=parsed.amount,
            card_id=parsed.card_id,
            community_name=message.chat.title,
        )
        result = await service.handle(request)
        await safe_send_result(message, result)

    @router.callback_query(F.data.startswith(SETCARD_PREFIX))
    async def handle_setcard_choice(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user or not callback.data or not callback.message:
            return
        request = StampRequest(
            community_id=str(callback.message.chat.id),
            subcommand=Subcommand.SETCARD,
            actor=ActorCapabilities(user_id=str(user.id)),
            actor_name=display_name(user),
            card_id=callback.data.removeprefix(SETCARD_PREFIX),
        )
        result = await service.handle(request)
        await safe_api_call("callback.answer", callback.answer, result.message, show_alert=True)

    return router


def _replied_user(message: Message) -> User | None:
    reply = message.reply_to_message
    if reply and reply.from_user and not reply.from_user.is_bot:
        return reply.from_user
    return None


async def _fetch_member(bot: Bot, chat_id: int, user_id: int) -> MemberRef | None:
    member = await safe_api_call("bot.get_chat_member", bot.get_chat_member, chat_id, user_id)
    if member is None or member.status in DEPARTED:
        return None
    return MemberRef(str(member.user.id), display_name(member.user))


__all__ = ["build_router", "parse_stamp_args", "ParsedArgs", "USAGE"]
