"""Configuration models for StampForge."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

logger = logging.getLogger(__name__)

StorageBackend = Literal["memory", "sqlalchemy"]

PACKAGED_CATALOG = Path(__file__).with_name("data") / "cards.json"
_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure how stamp progress is persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./stamps.sqlite"
        return None


@dataclass(slots=True)
class AdminConfig:
    """Who may manage stamps and where management actions are reported."""

    admin_ids: set[int] = field(default_factory=set)
    mod_role: str | None = None
    manager_roles: set[str] = field(default_factory=set)
    log_chat_id: int | None = None
    completed_chat_id: int | None = None
    enable_audit_logs: bool = True

    def manager_role_ids(self) -> frozenset[str]:
        roles = set(self.manager_roles)
        if self.mod_role:
            roles.add(self.mod_role)
        return frozenset(roles)


@dataclass(slots=True)
class StampConfig:
    """Rules and assets for stamp cards."""

    goal: int = 10
    default_card: str = "og"
    assets_dir: Path = Path("assets")
    glyph: str = "stamp.png"
    catalog_path: Path = PACKAGED_CATALOG
    leaderboard_size: int = 10


@dataclass(slots=True)
class StampForgeConfig:
    """Top-level configuration container."""

    bot_token: str = ""
    storage: StorageConfig = field(default_factory=StorageConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    stamps: StampConfig = field(default_factory=StampConfig)

    @classmethod
    def from_env(cls) -> "StampForgeConfig":
        """Create config from environment variables prefixed with STAMPFORGE_."""
        prefix = "STAMPFORGE_"
        storage_backend = os.getenv(f"{prefix}STORAGE_BACKEND", "memory")
        if storage_backend not in {"memory", "sqlalchemy"}:
            raise ValueError(f"Invalid {prefix}STORAGE_BACKEND '{storage_backend}'")
        dsn = os.getenv(f"{prefix}STORAGE_DSN")
        echo_sql = os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY

        admin_config = AdminConfig(
            admin_ids={int(_id) for _id in _split_csv(os.getenv(f"{prefix}ADMIN_IDS"))},
            mod_role=os.getenv(f"{prefix}MOD_ROLE") or None,
            manager_roles=set(_split_csv(os.getenv(f"{prefix}MANAGER_ROLES"))),
            log_chat_id=_optional_int(os.getenv(f"{prefix}LOG_CHAT_ID")),
            completed_chat_id=_optional_int(os.getenv(f"{prefix}COMPLETED_CHAT_ID")),
            enable_audit_logs=os.getenv(f"{prefix}ENABLE_AUDIT_LOGS", "true").lower() in _TRUTHY,
        )
        if admin_config.log_chat_id is None:
            logger.warning("%sLOG_CHAT_ID not set; stamp transcripts are disabled.", prefix)
        if admin_config.completed_chat_id is None:
            logger.warning("%sCOMPLETED_CHAT_ID not set; completion posts are disabled.", prefix)

        stamp_config = StampConfig(
            goal=int(os.getenv(f"{prefix}STAMP_GOAL", "10")),
            default_card=os.getenv(f"{prefix}DEFAULT_CARD", "og") or "og",
            assets_dir=Path(os.getenv(f"{prefix}ASSETS_DIR", "assets")),
            glyph=os.getenv(f"{prefix}STAMP_GLYPH", "stamp.png") or "stamp.png",
            catalog_path=Path(os.getenv(f"{prefix}CATALOG_PATH") or PACKAGED_CATALOG),
            leaderboard_size=int(os.getenv(f"{prefix}LEADERBOARD_SIZE", "10")),
        )
        if stamp_config.goal <= 0:
            raise ValueError(f"{prefix}STAMP_GOAL must be a positive integer")

        return cls(
            bot_token=os.getenv(f"{prefix}BOT_TOKEN", ""),
            storage=StorageConfig(backend=storage_backend, dsn=dsn, echo_sql=echo_sql),
            admin=admin_config,
            stamps=stamp_config,
        )


def _split_csv(raw: str | None) -> list[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def _optional_int(raw: str | None) -> int | None:
    if not raw or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Expected an integer chat id, got '{raw}'") from exc
