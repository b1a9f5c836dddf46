"""User-facing texts for stamp commands and notices."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..domain.leaderboard import LeaderboardEntry
from ..domain.notifications import CompletionNotice, TranscriptEntry

NO_PERMISSION = "❌ You don't have permission to manage stamps."
RESET_ALL_FORBIDDEN = "❌ Only the community owner or admins can reset the entire community."
MEMBER_NOT_FOUND = "❌ I can't find that member in this community."
OWN_CARD_INVALID = "❌ Your saved card is invalid. Run /stamp setcard again."
TARGET_CARD_INVALID = "❌ That user has an invalid saved card. Ask them to run /stamp setcard."
UNKNOWN_CARD_CHOICE = "❌ Unknown card choice."
INVALID_AMOUNT = "❌ Amount must be a positive whole number."
LEADERBOARD_EMPTY = "📊 No stamps have been issued yet."
UNKNOWN_SUBCOMMAND = "❌ Unknown subcommand."
GENERIC_FAILURE = "❌ Something went wrong while running that command."
RESET_ALL_DONE = "♻️ Community reset complete. All stamp cards are back to 0."


def format_progress(name: str, card_name: str, count: int, goal: int) -> str:
    return f"👑 {name} - {card_name} - {count}/{goal}"


def format_adjusted(name: str, card_name: str, count: int, goal: int) -> str:
    return f"✅ {name} now has {count}/{goal} on {card_name}."


def format_reset(name: str, card_name: str, goal: int) -> str:
    return f"♻️ Reset complete. {name} is now 0/{goal} on {card_name}."


def format_card_saved(card_name: str) -> str:
    return f"✅ Saved! Your stamp card is now {card_name}."


def describe_adjustment(is_addition: bool, amount: int, previous: int, next_count: int) -> str:
    if is_addition:
        return f"➕ Added {amount} ({previous} → {next_count})"
    return f"➖ Removed {amount} ({previous} → {next_count})"


def describe_reset(previous: int) -> str:
    return f"♻️ Reset (was {previous})"


def format_leaderboard(entries: Sequence[LeaderboardEntry], goal: int) -> str:
    lines = ["🏆 STAMP LEADERBOARD 🏆", ""]
    for entry in entries:
        lines.append(f"{entry.rank}. 👑 {entry.display_name} - {entry.count}/{goal} ({entry.card_name})")
    return "\n".join(lines)


def format_transcript(entry: TranscriptEntry) -> str:
    if entry.target is None:
        lines = [
            "🧾 Stamp System Reset (ALL)",
            f"• Action: {entry.action}",
            f"• By: {entry.actor}",
        ]
        if entry.community_name:
            lines.append(f"• Community: {entry.community_name}")
    else:
        lines = [
            "🧾 Stamp Transcript",
            f"• Member: {entry.target}",
            f"• Action: {entry.action}",
            f"• Card: {entry.card_name}",
            f"• Total: {entry.resulting_count}/{entry.goal}",
            f"• By: {entry.actor}",
        ]
    lines.append(f"• When: {_when(entry.created_at)}")
    return "\n".join(lines)


def format_completion(notice: CompletionNotice) -> str:
    return "\n".join(
        [
            "🎉 STAMP CARD COMPLETED! 🎉",
            f"👑 Member: {notice.target}",
            f"🪪 Card: {notice.card_name}",
            f"✅ Total: {notice.count}/{notice.goal}",
            f"🛡️ Verified by: {notice.actor}",
            f"⏰ {_when(notice.created_at)}",
        ]
    )


def _when(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M UTC")
