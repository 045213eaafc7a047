"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Tier(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: object) -> Tier | None:
        """Return the tier named by ``value`` (case-insensitive) or ``None``."""

        if isinstance(value, Tier):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class SubmissionStatus(StrEnum):
    ACCEPTED = "accepted"
    NOT_ACCEPTED = "not_accepted"
    PENDING = "pending"
    UNKNOWN = "unknown"


class SyncOutcome(StrEnum):
    NONE = "none"
    SUCCESS = "success"
    FAILED = "failed"
