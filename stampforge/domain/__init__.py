"""Domain models and services."""

from .cards import CardCatalog, CardDesign, SlotPosition, StampStyle
from .events import EventBus
from .exceptions import (
    InvalidCardError,
    NotFoundError,
    PermissionDenied,
    RenderError,
    StampForgeError,
    StorageError,
    ValidationError,
)
from .leaderboard import DirectoryLookup, IdentityDirectory, LeaderboardEntry, LeaderboardRanker
from .notifications import (
    CompletionNotice,
    NotificationChannel,
    NullNotificationChannel,
    RecordingNotificationChannel,
    TranscriptEntry,
)
from .permissions import ActorCapabilities, can_manage, can_reset_all
from .progress import Adjustment, ProgressEngine, ProgressView
from .rewards import InMemoryRewardSync, RewardSync

__all__ = [
    "CardCatalog",
    "CardDesign",
    "SlotPosition",
    "StampStyle",
    "EventBus",
    "InvalidCardError",
    "NotFoundError",
    "PermissionDenied",
    "RenderError",
    "StampForgeError",
    "StorageError",
    "ValidationError",
    "DirectoryLookup",
    "IdentityDirectory",
    "LeaderboardEntry",
    "LeaderboardRanker",
    "CompletionNotice",
    "NotificationChannel",
    "NullNotificationChannel",
    "RecordingNotificationChannel",
    "TranscriptEntry",
    "ActorCapabilities",
    "can_manage",
    "can_reset_all",
    "Adjustment",
    "ProgressEngine",
    "ProgressView",
    "InMemoryRewardSync",
    "RewardSync",
]
