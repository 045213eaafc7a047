"""Submission capture: wait for a grading result and normalize it.

Two bounded loops run back to back. The first waits for the page to expose a
submission location, the second polls the structured result source until the
grading job finishes. When either gives up, or the source cannot be reached,
the rendered page is mined by the fallback extractor chain instead.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.config.polling import PollingConfig
from codetally.domain.errors import CaptureTimeout, SourceUnavailable
from codetally.domain.extraction import ExtractorChain
from codetally.domain.polling import Sleep, poll

if TYPE_CHECKING:
    from codetally.domain.model import SubmissionRecord
    from codetally.domain.ports import CaptureContext, GradingResultSource

log = getLogger(__name__)

SUBMISSION_LOCATION = re.compile(r"/submissions/(?:detail/)?(\d+)")


def submission_id_from_location(location: str | None) -> str | None:
    """Return the numeric submission id embedded in a page location."""

    if not location:
        return None
    match = SUBMISSION_LOCATION.search(location)
    return match.group(1) if match else None


@dataclass(slots=True)
class SubmissionPoller:
    source: GradingResultSource
    fallback: ExtractorChain = field(default_factory=lambda: ExtractorChain(extractors=()))
    config: PollingConfig = field(default_factory=PollingConfig)
    sleep: Sleep = asyncio.sleep

    async def capture(self, context: CaptureContext) -> SubmissionRecord:
        """Produce a record for the submission shown in ``context``.

        Raises ``CaptureTimeout`` or ``SourceUnavailable`` only when the fallback
        extraction could not recover a single field either.
        """

        submission_id: str | None = None
        try:
            submission_id = await self.resolve_location(context)
            return await self.await_result(submission_id)
        except (CaptureTimeout, SourceUnavailable) as exc:
            log.warning("Structured capture failed (%s); trying page extraction", exc)
            return await self._extract_fallback(context, submission_id=submission_id, cause=exc)

    async def resolve_location(self, context: CaptureContext) -> str:
        async def probe(_attempt: int) -> str | None:
            return submission_id_from_location(await context.current_location())

        submission_id = await poll(
            probe,
            max_attempts=self.config.location_attempts,
            interval=self.config.location_interval,
            label="submission location",
            sleep=self.sleep,
        )
        log.info("Found submission %s", submission_id)
        return submission_id

    async def await_result(self, submission_id: str) -> SubmissionRecord:
        if self.config.settle_delay:
            await self.sleep(self.config.settle_delay)

        async def probe(attempt: int) -> SubmissionRecord | None:
            observation = await self.source.fetch_result(submission_id)
            if observation is None:
                raise SourceUnavailable(f"No data returned for submission {submission_id}")
            if not observation.finished:
                log.debug("Submission %s still pending (poll %s)", submission_id, attempt)
                return None
            return observation.record

        record = await poll(
            probe,
            max_attempts=self.config.result_attempts,
            interval=self.config.result_interval,
            label=f"submission {submission_id}",
            sleep=self.sleep,
        )
        log.info("Submission %s finished with status %s", submission_id, record.status)
        return record

    async def _extract_fallback(
        self,
        context: CaptureContext,
        *,
        submission_id: str | None,
        cause: CaptureTimeout | SourceUnavailable,
    ) -> SubmissionRecord:
        partial = self.fallback.extract(await context.document())
        if partial.is_empty:
            log.error("Page extraction recovered nothing for submission %s", submission_id)
            raise cause
        if submission_id is None:
            submission_id = submission_id_from_location(await context.current_location())
        return partial.to_record(submission_id=submission_id)
