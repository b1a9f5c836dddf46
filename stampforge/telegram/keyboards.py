"""Keyboard helpers for StampForge bots."""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from ..domain.cards import CardCatalog

SETCARD_PREFIX = "stampforge:setcard:"


def card_choice_keyboard(catalog: CardCatalog) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=f"🪪 {name}", callback_data=f"{SETCARD_PREFIX}{card_id}")]
            for card_id, name in catalog.choices()
        ]
    )
