"""Example: run a StampForge bot backed by a local SQLite file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from stampforge.abstractions import SimpleBotConfig, run_simple_bot_sync

logging.basicConfig(level=logging.INFO)


def main() -> None:
    token = os.environ["STAMPFORGE_BOT_TOKEN"]
    run_simple_bot_sync(
        SimpleBotConfig(
            bot_token=token,
            assets_dir=Path(__file__).with_name("assets"),
            storage="./data/stamps.sqlite",
        )
    )


if __name__ == "__main__":
    main()
