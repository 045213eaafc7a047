"""Translate LeetCode payloads into domain values."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from codetally.domain.errors import CatalogUnavailable
from codetally.domain.model import (
    DifficultyEntry,
    SubmissionRecord,
    SubmissionStatus,
    Tier,
    TopicTag,
)
from codetally.domain.normalization import (
    language_tag,
    parse_memory_bytes,
    parse_runtime_ms,
    round_percentile,
)
from codetally.domain.ports import GradingPoll

if TYPE_CHECKING:
    from datetime import datetime

    from .schema import CatalogResponse, SubmissionDetails

log = getLogger(__name__)

ACCEPTED_STATUS_CODE: Final = 10

TIER_BY_LEVEL: Final[dict[int, Tier]] = {
    1: Tier.EASY,
    2: Tier.MEDIUM,
    3: Tier.HARD,
}


def status_from_code(status_code: int | None) -> SubmissionStatus:
    if status_code is None:
        return SubmissionStatus.PENDING
    if status_code == ACCEPTED_STATUS_CODE:
        return SubmissionStatus.ACCEPTED
    return SubmissionStatus.NOT_ACCEPTED


def translate_submission(
    details: SubmissionDetails,
    *,
    submission_id: str,
    captured_at: datetime | None = None,
) -> GradingPoll:
    """Turn one submission-details payload into a poll observation.

    A payload without a status code is still being graded. Finished payloads
    become a complete record whatever the verdict was.
    """

    status = status_from_code(details.status_code)
    if status is SubmissionStatus.PENDING:
        return GradingPoll.pending()

    runtime_ms = parse_runtime_ms(details.runtime)
    if runtime_ms is None:
        runtime_ms = parse_runtime_ms(details.runtime_display)
    memory_bytes = parse_memory_bytes(details.memory_display)
    if memory_bytes is None:
        memory_bytes = parse_memory_bytes(details.memory)

    language_name = None
    if details.lang is not None:
        language_name = details.lang.verbose_name or details.lang.name

    question = details.question
    extra = {"captured_at": captured_at} if captured_at is not None else {}
    record = SubmissionRecord(
        canonical_id=question.frontend_id if question else None,
        status=status,
        runtime_ms=runtime_ms,
        memory_bytes=memory_bytes,
        runtime_percentile=round_percentile(details.runtime_percentile),
        memory_percentile=round_percentile(details.memory_percentile),
        source_code=details.code or "",
        language_tag=language_tag(language_name),
        submission_id=submission_id,
        title_slug=question.title_slug if question else None,
        language_name=language_name,
        topic_tags=tuple(
            TopicTag(tag_id=tag.tag_id, slug=tag.slug, name=tag.name) for tag in details.topic_tags
        ),
        **extra,
    )
    return GradingPoll.done(record)


def translate_catalog(payload: CatalogResponse) -> list[DifficultyEntry]:
    """Map every catalog pair to a ``DifficultyEntry`` keyed by frontend id."""

    pairs = payload.stat_status_pairs
    if not pairs:
        raise CatalogUnavailable("Difficulty catalog is empty")
    if payload.num_total is not None and len(pairs) < payload.num_total:
        raise CatalogUnavailable(
            f"Difficulty catalog is incomplete: {len(pairs)} of {payload.num_total} problems"
        )

    entries: list[DifficultyEntry] = []
    for pair in pairs:
        tier = TIER_BY_LEVEL.get(pair.difficulty.level)
        if tier is None:
            log.debug(
                "Skipping problem %s with unknown level %s",
                pair.stat.frontend_question_id,
                pair.difficulty.level,
            )
            continue
        entries.append(DifficultyEntry(canonical_id=str(pair.stat.frontend_question_id), tier=tier))
    return entries


def catalog_payload_is_complete(payload: object) -> bool:
    """Cache predicate: only keep catalog responses that carry problems."""

    if not isinstance(payload, dict):
        return False
    pairs = payload.get("stat_status_pairs")
    return isinstance(pairs, list) and bool(pairs)
