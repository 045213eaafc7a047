"""Publish accepted solutions to the linked repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.config.sync import SyncConfig, get_sync_config
from codetally.domain.normalization import file_extension

from .client import GitHubContentsClient

if TYPE_CHECKING:
    from codetally.domain.model import RepositoryCoordinates, SubmissionRecord

    from .schema import ContentWriteResponse

log = getLogger(__name__)


def solution_path(record: SubmissionRecord) -> str | None:
    """Return ``<language>/<NNNN slug>.<ext>`` for ``record``, if it can be named."""

    if not record.canonical_id or not record.title_slug or not record.canonical_id.isdigit():
        return None
    number = int(record.canonical_id)
    if number > 9999:
        return None
    extension = file_extension(record.language_tag)
    return f"{record.language_tag}/{number:04d} {record.title_slug}.{extension}"


def commit_message(record: SubmissionRecord) -> str:
    parts = [f"Add solution for {record.canonical_id}. {record.title_slug}"]
    if record.runtime_display:
        parts.append(f"runtime {record.runtime_display}")
    if record.memory_display:
        parts.append(f"memory {record.memory_display}")
    return " | ".join(parts)


@dataclass(slots=True)
class SolutionPublisher:
    contents: GitHubContentsClient = field(default_factory=GitHubContentsClient)
    config: SyncConfig = field(default_factory=get_sync_config)

    async def publish(
        self, record: SubmissionRecord, coordinates: RepositoryCoordinates
    ) -> ContentWriteResponse | None:
        """Write the record's source code into the repository.

        Returns ``None`` when publishing is disabled or the record does not
        qualify; write failures raise ``RepositoryUnreachable``.
        """

        if not self.config.code_submit:
            log.debug("Code submission disabled; not publishing %s", record.submission_id)
            return None
        if not record.accepted or not record.source_code:
            log.info("Submission %s is not an accepted solution; skipping", record.submission_id)
            return None
        path = solution_path(record)
        if path is None:
            log.warning("Cannot name a file for submission %s; skipping", record.submission_id)
            return None

        response = await self.contents.put_file(
            coordinates, path, record.source_code, message=commit_message(record)
        )
        log.info("Published %s to %s (%s)", path, coordinates, response.commit.sha)
        return response
