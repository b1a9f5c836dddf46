"""Telegram integration helpers."""

from .aiogram_router import build_router
from .directory import TelegramDirectoryLookup
from .filters import ActorFilter, CommunityChatFilter, resolve_actor
from .keyboards import card_choice_keyboard
from .notifications import TelegramNotificationChannel

__all__ = [
    "build_router",
    "TelegramDirectoryLookup",
    "ActorFilter",
    "CommunityChatFilter",
    "resolve_actor",
    "card_choice_keyboard",
    "TelegramNotificationChannel",
]
