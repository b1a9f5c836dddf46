import os
from pathlib import Path

import pytest

from stampforge.config import PACKAGED_CATALOG, StampForgeConfig


@pytest.fixture()
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("STAMPFORGE_"):
            monkeypatch.delenv(key)
    return monkeypatch


def test_from_env_defaults(clean_env):
    config = StampForgeConfig.from_env()

    assert config.bot_token == ""
    assert config.storage.backend == "memory"
    assert config.storage.resolve_dsn() is None
    assert config.stamps.goal == 10
    assert config.stamps.default_card == "og"
    assert config.stamps.catalog_path == PACKAGED_CATALOG
    assert config.admin.log_chat_id is None
    assert config.admin.manager_role_ids() == frozenset()


def test_from_env_reads_values(clean_env):
    clean_env.setenv("STAMPFORGE_BOT_TOKEN", "123:abc")
    clean_env.setenv("STAMPFORGE_STORAGE_BACKEND", "sqlalchemy")
    clean_env.setenv("STAMPFORGE_ADMIN_IDS", "1, 2")
    clean_env.setenv("STAMPFORGE_MOD_ROLE", "Stamp Mod")
    clean_env.setenv("STAMPFORGE_MANAGER_ROLES", "Barista,Manager")
    clean_env.setenv("STAMPFORGE_LOG_CHAT_ID", "-1001")
    clean_env.setenv("STAMPFORGE_COMPLETED_CHAT_ID", "-1002")
    clean_env.setenv("STAMPFORGE_STAMP_GOAL", "8")
    clean_env.setenv("STAMPFORGE_ASSETS_DIR", "/srv/cards")
    clean_env.setenv("STAMPFORGE_ENABLE_AUDIT_LOGS", "no")

    config = StampForgeConfig.from_env()

    assert config.bot_token == "123:abc"
    assert config.storage.resolve_dsn() == "sqlite+aiosqlite:///./stamps.sqlite"
    assert config.admin.admin_ids == {1, 2}
    assert config.admin.manager_role_ids() == frozenset({"Stamp Mod", "Barista", "Manager"})
    assert (config.admin.log_chat_id, config.admin.completed_chat_id) == (-1001, -1002)
    assert config.admin.enable_audit_logs is False
    assert config.stamps.goal == 8
    assert config.stamps.assets_dir == Path("/srv/cards")


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("STAMPFORGE_STORAGE_BACKEND", "redis"),
        ("STAMPFORGE_STAMP_GOAL", "0"),
        ("STAMPFORGE_LOG_CHAT_ID", "general"),
    ],
)
def test_from_env_rejects_bad_values(clean_env, key, value):
    clean_env.setenv(key, value)

    with pytest.raises(ValueError):
        StampForgeConfig.from_env()
