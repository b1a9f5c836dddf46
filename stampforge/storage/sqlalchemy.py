"""SQLAlchemy storage backend for StampForge."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from sqlalchemy import DateTime, Integer, JSON, String, delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.exceptions import StorageError
from .base import AuditStore, CountTransform, KeyedLocks, LeaderboardRow, ProgressStore

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class StampTable(Base):
    __tablename__ = "stamps"

    community_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    card_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class UserCardTable(Base):
    __tablename__ = "user_cards"

    community_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    card_id: Mapped[str] = mapped_column(String(64))


class AuditTable(Base):
    __tablename__ = "stampforge_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    action: Mapped[str] = mapped_column(String(128))
    payload: Mapped[dict] = mapped_column(JSON)


def _insert_for(dialect: str):
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise ValueError(f"Unsupported SQL dialect {dialect} (expected sqlite or postgresql)")


@asynccontextmanager
async def _storage_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage operation '%s' failed: %s", operation, exc)
        raise StorageError(f"Storage operation '{operation}' failed") from exc


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        self._progress_store: AsyncSQLAlchemyProgressStore | None = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def progress_store(self) -> "AsyncSQLAlchemyProgressStore":
        if self._progress_store is None:
            self._progress_store = AsyncSQLAlchemyProgressStore(
                self._session_factory, dialect=self._engine.dialect.name
            )
        return self._progress_store

    def audit_store(self) -> "AsyncSQLAlchemyAuditStore":
        return AsyncSQLAlchemyAuditStore(self._session_factory)


class AsyncSQLAlchemyProgressStore(ProgressStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], *, dialect: str) -> None:
        self._session_factory = session_factory
        self._insert = _insert_for(dialect)
        self._locks = KeyedLocks()

    async def get_count(self, community_id: str, user_id: str, card_id: str) -> int:
        async with _storage_errors("get_count"), self._session_factory() as session:
            record = await session.get(StampTable, (community_id, user_id, card_id))
            return record.count if record else 0

    async def set_count(
        self, community_id: str, user_id: str, card_id: str, count: int, timestamp: datetime
    ) -> None:
        async with _storage_errors("set_count"), self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    self._upsert_stamp(community_id, user_id, card_id, count, timestamp)
                )

    async def update_count(
        self,
        community_id: str,
        user_id: str,
        card_id: str,
        transform: CountTransform,
        timestamp: datetime,
    ) -> tuple[int, int]:
        key = (community_id, user_id, card_id)
        async with self._locks.hold(key), _storage_errors("update_count"):
            async with self._session_factory() as session, session.begin():
                stmt = (
                    select(StampTable.count)
                    .where(
                        StampTable.community_id == community_id,
                        StampTable.user_id == user_id,
                        StampTable.card_id == card_id,
                    )
                    .with_for_update()
                )
                previous = (await session.execute(stmt)).scalar_one_or_none() or 0
                next_count = transform(previous)
                await session.execute(
                    self._upsert_stamp(community_id, user_id, card_id, next_count, timestamp)
                )
            return previous, next_count

    async def pop_count(self, community_id: str, user_id: str, card_id: str) -> int:
        key = (community_id, user_id, card_id)
        match = (
            StampTable.community_id == community_id,
            StampTable.user_id == user_id,
            StampTable.card_id == card_id,
        )
        async with self._locks.hold(key), _storage_errors("pop_count"):
            async with self._session_factory() as session, session.begin():
                stmt = select(StampTable.count).where(*match).with_for_update()
                previous = (await session.execute(stmt)).scalar_one_or_none() or 0
                await session.execute(delete(StampTable).where(*match))
            return previous

    async def list_top(self, community_id: str, limit: int) -> Sequence[LeaderboardRow]:
        async with _storage_errors("list_top"), self._session_factory() as session:
            stmt = (
                select(StampTable)
                .where(StampTable.community_id == community_id)
                .order_by(StampTable.count.desc(), StampTable.updated_at.asc())
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [
                LeaderboardRow(
                    user_id=row.user_id,
                    card_id=row.card_id,
                    count=row.count,
                    updated_at=row.updated_at,
                )
                for row in rows
            ]

    async def reset_community(self, community_id: str) -> None:
        async with _storage_errors("reset_community"), self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    delete(StampTable).where(StampTable.community_id == community_id)
                )

    async def get_selection(self, community_id: str, user_id: str) -> str | None:
        async with _storage_errors("get_selection"), self._session_factory() as session:
            record = await session.get(UserCardTable, (community_id, user_id))
            return record.card_id if record else None

    async def set_selection(self, community_id: str, user_id: str, card_id: str) -> None:
        stmt = self._insert(UserCardTable).values(
            community_id=community_id, user_id=user_id, card_id=card_id
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserCardTable.community_id, UserCardTable.user_id],
            set_={"card_id": stmt.excluded.card_id},
        )
        async with _storage_errors("set_selection"), self._session_factory() as session:
            async with session.begin():
                await session.execute(stmt)

    def _upsert_stamp(
        self, community_id: str, user_id: str, card_id: str, count: int, timestamp: datetime
    ):
        stmt = self._insert(StampTable).values(
            community_id=community_id,
            user_id=user_id,
            card_id=card_id,
            count=count,
            updated_at=timestamp,
        )
        return stmt.on_conflict_do_update(
            index_elements=[StampTable.community_id, StampTable.user_id, StampTable.card_id],
            set_={"count": stmt.excluded.count, "updated_at": stmt.excluded.updated_at},
        )


class AsyncSQLAlchemyAuditStore(AuditStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_entry(self, action: str, payload: dict) -> None:
        async with _storage_errors("add_entry"), self._session_factory() as session:
            session.add(
                AuditTable(
                    created_at=datetime.now(timezone.utc),
                    action=action,
                    payload=dict(payload),
                )
            )
            await session.commit()
