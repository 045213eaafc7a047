"""Domain model for capture and reconciliation."""

from __future__ import annotations

from .coordinates import RepositoryCoordinates
from .enums import SubmissionStatus, SyncOutcome, Tier
from .records import (
    UNKNOWN_LANGUAGE,
    DifficultyEntry,
    RepositoryFile,
    StatsSnapshot,
    SubmissionRecord,
    SyncStatus,
    TierCounts,
    TopicTag,
)

__all__ = [
    "UNKNOWN_LANGUAGE",
    "DifficultyEntry",
    "RepositoryCoordinates",
    "RepositoryFile",
    "StatsSnapshot",
    "SubmissionRecord",
    "SubmissionStatus",
    "SyncOutcome",
    "SyncStatus",
    "Tier",
    "TierCounts",
    "TopicTag",
]
