"""Ports used by submission capture."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from codetally.domain.model import SubmissionRecord


@runtime_checkable
class CaptureContext(Protocol):
    """The page or session a submission is being captured from."""

    async def current_location(self) -> str | None:
        """Return the current page location (URL), if any."""
        ...

    async def document(self) -> str | None:
        """Return the rendered page markup for fallback extraction, if available."""
        ...


@dataclass(frozen=True, slots=True)
class GradingPoll:
    """One observation of the structured result source."""

    record: SubmissionRecord | None = None

    @property
    def finished(self) -> bool:
        return self.record is not None

    @classmethod
    def pending(cls) -> GradingPoll:
        return cls()

    @classmethod
    def done(cls, record: SubmissionRecord) -> GradingPoll:
        return cls(record=record)


@runtime_checkable
class GradingResultSource(Protocol):
    """Structured query for a grading result.

    Returns ``None`` when the source answered without any data, and raises
    ``SourceUnavailable`` when it could not be reached.
    """

    async def fetch_result(self, submission_id: str) -> GradingPoll | None: ...
