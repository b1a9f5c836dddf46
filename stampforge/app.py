"""Top level application object for StampForge bots."""

from __future__ import annotations

from typing import Any

from .commands.service import StampCommandService
from .config import StampForgeConfig
from .domain.cards import CardCatalog
from .domain.events import EventBus
from .domain.leaderboard import DirectoryLookup, IdentityDirectory, LeaderboardRanker
from .domain.notifications import NotificationChannel, NullNotificationChannel
from .domain.progress import Clock, ProgressEngine
from .domain.rewards import InMemoryRewardSync, RewardSync
from .loaders import load_catalog_from_json
from .rendering.renderer import CardRenderer
from .storage.base import AuditStore, ProgressStore
from .storage.memory import InMemoryAuditStore, InMemoryProgressStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage


class BotApp:
    """Central dependency container used by bots and extensions."""

    def __init__(
        self,
        config: StampForgeConfig,
        *,
        catalog: CardCatalog | None = None,
        progress_store: ProgressStore | None = None,
        audit_store: AuditStore | None = None,
        event_bus: EventBus | None = None,
        reward_sync: RewardSync | None = None,
        notifications: NotificationChannel | None = None,
        directory: DirectoryLookup | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.catalog = catalog or load_catalog_from_json(config.stamps.catalog_path)

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.progress_store, self.audit_store = self._wire_storage(progress_store, audit_store)

        self.reward_sync = reward_sync or InMemoryRewardSync(self.event_bus)
        self.engine = ProgressEngine(
            self.progress_store,
            self.catalog,
            goal=config.stamps.goal,
            default_card=config.stamps.default_card,
            clock=clock,
        )
        self.renderer = CardRenderer(
            self.catalog, config.stamps.assets_dir, glyph=config.stamps.glyph
        )
        self.attach_transport(
            directory=directory or IdentityDirectory(),
            notifications=notifications or NullNotificationChannel(),
        )

    def attach_transport(
        self,
        *,
        directory: DirectoryLookup | None = None,
        notifications: NotificationChannel | None = None,
    ) -> None:
        """Swap the chat-facing collaborators and rebuild dependent services."""
        if directory is not None:
            self.directory = directory
        if notifications is not None:
            self.notifications = notifications
        self.leaderboard = LeaderboardRanker(self.progress_store, self.catalog, self.directory)
        self.commands = StampCommandService(
            self.engine,
            self.catalog,
            self.renderer,
            self.leaderboard,
            reward_sync=self.reward_sync,
            notifications=self.notifications,
            audit_store=self.audit_store,
            event_bus=self.event_bus,
            manager_role_ids=self.config.admin.manager_role_ids(),
            leaderboard_size=self.config.stamps.leaderboard_size,
            audit_enabled=self.config.admin.enable_audit_logs,
        )

    def _wire_storage(
        self,
        progress_store: ProgressStore | None,
        audit_store: AuditStore | None,
    ) -> tuple[ProgressStore, AuditStore]:
        if progress_store and audit_store:
            return progress_store, audit_store

        backend = self.config.storage.backend
        if backend == "memory":
            return (
                progress_store or InMemoryProgressStore(),
                audit_store or InMemoryAuditStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return (
                progress_store or storage.progress_store(),
                audit_store or storage.audit_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "goal": self.engine.goal,
            "default_card": self.config.stamps.default_card,
            "cards": [design.card_id for design in self.catalog.iter_designs()],
            "assets_dir": str(self.config.stamps.assets_dir),
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
