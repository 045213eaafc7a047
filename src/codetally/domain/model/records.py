"""Value objects shared by the capture and reconciliation pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from .enums import SubmissionStatus, SyncOutcome, Tier

UNKNOWN_LANGUAGE = "unknown"
BYTES_PER_MEGABYTE = 1024 * 1024


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


@dataclass(frozen=True, slots=True)
class TopicTag:
    tag_id: str
    slug: str
    name: str


@dataclass(frozen=True, slots=True)
class SubmissionRecord:
    """A fully resolved grading result.

    Records are only built once the result is known; there is no partially
    populated state. Fields the source could not provide stay ``None``.
    """

    canonical_id: str | None
    status: SubmissionStatus
    runtime_ms: float | None = None
    memory_bytes: int | None = None
    runtime_percentile: float | None = None
    memory_percentile: float | None = None
    source_code: str = ""
    language_tag: str = UNKNOWN_LANGUAGE
    captured_at: datetime = field(default_factory=_utcnow)
    submission_id: str | None = None
    title_slug: str | None = None
    language_name: str | None = None
    topic_tags: tuple[TopicTag, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.status is SubmissionStatus.ACCEPTED

    @property
    def runtime_display(self) -> str | None:
        if self.runtime_ms is None:
            return None
        return f"{_format_number(self.runtime_ms)} ms"

    @property
    def memory_display(self) -> str | None:
        if self.memory_bytes is None:
            return None
        return f"{self.memory_bytes / BYTES_PER_MEGABYTE:.1f} MB"


@dataclass(frozen=True, slots=True)
class RepositoryFile:
    original_name: str
    canonical_id: str
    language_folder: str


@dataclass(frozen=True, slots=True)
class DifficultyEntry:
    canonical_id: str
    tier: Tier


@dataclass(frozen=True, slots=True)
class TierCounts:
    easy: int = 0
    medium: int = 0
    hard: int = 0

    def __post_init__(self) -> None:
        for tier in Tier:
            value = getattr(self, tier.value)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Tier count for {tier} must be a non-negative integer")

    @property
    def total(self) -> int:
        return self.easy + self.medium + self.hard

    def get(self, tier: Tier) -> int:
        return getattr(self, tier.value)

    def incremented(self, tier: Tier) -> TierCounts:
        """Return a copy with exactly one more solution in ``tier``."""

        return replace(self, **{tier.value: self.get(tier) + 1})

    def as_dict(self) -> dict[str, int]:
        return {tier.value: self.get(tier) for tier in Tier}


@dataclass(frozen=True, slots=True)
class SyncStatus:
    in_progress: bool = False
    last_outcome: SyncOutcome = SyncOutcome.NONE
    last_message: str = ""
    last_run_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """What observers receive whenever counts or sync status change."""

    counts: TierCounts
    status: SyncStatus
    last_update: datetime | None = None

    @property
    def is_counting_complete(self) -> bool:
        return not self.status.in_progress

    def as_dict(self) -> dict[str, object]:
        return {
            **self.counts.as_dict(),
            "in_progress": self.status.in_progress,
            "is_counting_complete": self.is_counting_complete,
            "last_outcome": self.status.last_outcome.value,
            "last_message": self.status.last_message,
            "last_run_at": self.status.last_run_at.isoformat()
            if self.status.last_run_at
            else None,
            "last_update": self.last_update.isoformat() if self.last_update else None,
        }
