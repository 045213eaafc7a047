"""Ordered fallback extraction of submission fields from a rendered page."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from codetally.domain.model import UNKNOWN_LANGUAGE, SubmissionRecord, SubmissionStatus
from codetally.domain.normalization import language_tag

if TYPE_CHECKING:
    from collections.abc import Sequence

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PartialSubmission:
    """Whatever an extractor could recover; every field is optional."""

    canonical_id: str | None = None
    title_slug: str | None = None
    status: SubmissionStatus | None = None
    runtime_ms: float | None = None
    memory_bytes: int | None = None
    runtime_percentile: float | None = None
    memory_percentile: float | None = None
    source_code: str | None = None
    language_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merged_with(self, other: PartialSubmission) -> PartialSubmission:
        """Fill this instance's missing fields from ``other``."""

        updates = {
            f.name: getattr(other, f.name)
            for f in fields(self)
            if getattr(self, f.name) is None and getattr(other, f.name) is not None
        }
        return replace(self, **updates) if updates else self

    def to_record(self, *, submission_id: str | None = None) -> SubmissionRecord:
        return SubmissionRecord(
            canonical_id=self.canonical_id,
            status=self.status or SubmissionStatus.UNKNOWN,
            runtime_ms=self.runtime_ms,
            memory_bytes=self.memory_bytes,
            runtime_percentile=self.runtime_percentile,
            memory_percentile=self.memory_percentile,
            source_code=self.source_code or "",
            language_tag=language_tag(self.language_name)
            if self.language_name
            else UNKNOWN_LANGUAGE,
            submission_id=submission_id,
            title_slug=self.title_slug,
            language_name=self.language_name,
        )


@runtime_checkable
class SubmissionExtractor(Protocol):
    """One extraction strategy over a rendered document."""

    name: str

    def extract(self, document: str) -> PartialSubmission | None: ...


@dataclass(slots=True)
class ExtractorChain:
    """Try extractors in priority order, keeping the first value found per field."""

    extractors: Sequence[SubmissionExtractor]

    def extract(self, document: str | None) -> PartialSubmission:
        merged = PartialSubmission()
        if not document:
            return merged
        for extractor in self.extractors:
            try:
                partial = extractor.extract(document)
            except Exception:
                log.exception("Extractor %s failed", extractor.name)
                continue
            if partial is None or partial.is_empty:
                continue
            log.debug("Extractor %s recovered %s", extractor.name, partial)
            merged = merged.merged_with(partial)
        return merged
