"""High-level helpers that simplify bootstrapping StampForge bots.

This module provides a straightforward, batteries-included API oriented towards
developers who do not want to wire the config, storage and router themselves.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from aiogram import Bot, Dispatcher
from rich.console import Console

from .app import BotApp
from .config import StampForgeConfig
from .telegram import TelegramDirectoryLookup, TelegramNotificationChannel, build_router
from .validators import validate_app

console = Console()


@dataclass(slots=True)
class SimpleBotConfig:
    """Minimal settings required to run a StampForge bot."""

    bot_token: str
    assets_dir: Path | None = None
    storage: str = "memory"  # "memory" or path to SQLite file
    admin_ids: Sequence[int] = ()
    goal: int | None = None


def build_config(config: SimpleBotConfig) -> StampForgeConfig:
    """Overlay simple settings on top of the environment configuration."""
    stampforge_config = StampForgeConfig.from_env()
    stampforge_config.bot_token = config.bot_token
    if config.storage != "memory":
        db_path = Path(config.storage).expanduser().resolve()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        stampforge_config.storage.backend = "sqlalchemy"
        stampforge_config.storage.dsn = f"sqlite+aiosqlite:///{db_path.as_posix()}"
    if config.admin_ids:
        stampforge_config.admin.admin_ids = set(config.admin_ids)
    if config.assets_dir is not None:
        stampforge_config.stamps.assets_dir = config.assets_dir
    if config.goal is not None:
        stampforge_config.stamps.goal = config.goal
    return stampforge_config


async def run_simple_bot(config: SimpleBotConfig) -> None:
    """Spin up a ready-to-go aiogram bot with sensible defaults.

    Rewards are tracked by ``InMemoryRewardSync``: holders are lost on restart
    and nothing listens to ``reward.granted`` or ``reward.revoked``. To grant a
    real marker such as a chat title or a coupon, subscribe to
    those events on ``app.event_bus`` or build ``BotApp`` with your own
    ``RewardSync``.
    """

    app = BotApp(build_config(config))
    await app.init_backend()

    for issue in validate_app(app):
        console.print(f"[yellow]warning:[/yellow] {issue}")

    bot = Bot(app.config.bot_token)
    app.attach_transport(
        directory=TelegramDirectoryLookup(bot),
        notifications=TelegramNotificationChannel(
            bot,
            log_chat_id=app.config.admin.log_chat_id,
            completed_chat_id=app.config.admin.completed_chat_id,
        ),
    )
    dp = Dispatcher()
    dp.include_router(build_router(app))

    console.print(
        f"[bold green]StampForge ready![/bold green]\n"
        f"Cards: {len(app.catalog)}, goal: {app.engine.goal}, storage: {app.config.storage.backend}",
    )
    try:
        await dp.start_polling(bot)
    finally:
        await app.close()


def run_simple_bot_sync(config: SimpleBotConfig) -> None:
    """Synchronous wrapper for run_simple_bot."""

    asyncio.run(run_simple_bot(config))


def main() -> None:
    """Entry point: run the bot configured purely from STAMPFORGE_* variables."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    env_config = StampForgeConfig.from_env()
    if not env_config.bot_token:
        console.print("[bold red]STAMPFORGE_BOT_TOKEN is not set.[/bold red]")
        raise SystemExit(1)
    run_simple_bot_sync(SimpleBotConfig(bot_token=env_config.bot_token))


__all__ = [
    "SimpleBotConfig",
    "build_config",
    "main",
    "run_simple_bot",
    "run_simple_bot_sync",
]
