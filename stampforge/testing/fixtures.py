"""Pytest fixtures for StampForge."""

from __future__ import annotations

from pathlib import Path

import pytest

from ..app import BotApp
from ..config import StampConfig, StampForgeConfig
from ..domain.cards import CardCatalog
from ..domain.notifications import RecordingNotificationChannel
from .factory import CardDesignFactory, write_assets


@pytest.fixture()
def memory_app(tmp_path: Path) -> BotApp:
    return app_fixture(tmp_path)


def app_fixture(assets_dir: Path, *, goal: int = 10, card_ids: tuple[str, ...] = ("og", "pink"), **kwargs) -> BotApp:
    """Build an in-memory app whose designs have generated assets on disk."""
    factory = CardDesignFactory()
    catalog = CardCatalog(factory.build(card_id, slots=goal) for card_id in card_ids)
    write_assets(catalog, assets_dir)
    config = StampForgeConfig(
        bot_token="test",
        stamps=StampConfig(goal=goal, default_card=card_ids[0], assets_dir=assets_dir),
    )
    kwargs.setdefault("notifications", RecordingNotificationChannel())
    return BotApp(config, catalog=catalog, **kwargs)
