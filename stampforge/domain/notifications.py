"""Transcript and completion notices sent to optional log channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from .progress import utcnow


@dataclass(slots=True)
class TranscriptEntry:
    actor: str
    action: str
    target: str | None = None
    resulting_count: int | None = None
    goal: int | None = None
    card_name: str | None = None
    image: bytes | None = None
    community_name: str | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class CompletionNotice:
    actor: str
    target: str
    count: int
    goal: int
    card_name: str
    image: bytes | None = None
    created_at: datetime = field(default_factory=utcnow)


class NotificationChannel(Protocol):
    async def send_transcript(self, community_id: str, entry: TranscriptEntry) -> None:
        ...

    async def send_completion(self, community_id: str, notice: CompletionNotice) -> None:
        ...


class NullNotificationChannel(NotificationChannel):
    async def send_transcript(self, community_id: str, entry: TranscriptEntry) -> None:
        return None

    async def send_completion(self, community_id: str, notice: CompletionNotice) -> None:
        return None


class RecordingNotificationChannel(NotificationChannel):
    """Keep every notice in memory; handy for tests and dry runs."""

    def __init__(self) -> None:
        self.transcripts: list[tuple[str, TranscriptEntry]] = []
        self.completions: list[tuple[str, CompletionNotice]] = []

    async def send_transcript(self, community_id: str, entry: TranscriptEntry) -> None:
        self.transcripts.append((community_id, entry))

    async def send_completion(self, community_id: str, notice: CompletionNotice) -> None:
        self.completions.append((community_id, notice))
