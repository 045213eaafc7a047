"""HTTP client for the LeetCode GraphQL endpoint and problem catalog."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from codetally.adapters.http_resilience import ResilientClient
from codetally.config.leetcode import LeetCodeConfig, get_leetcode_config
from codetally.domain.errors import CatalogUnavailable, SourceUnavailable

from .schema import CatalogResponse, SubmissionDetails, SubmissionDetailsResponse
from .translator import catalog_payload_is_complete, translate_submission

if TYPE_CHECKING:
    from codetally.adapters.http_resilience import ClientFactory
    from codetally.config.http_resilience import ResilienceConfig
    from codetally.domain.ports import GradingPoll

log = getLogger(__name__)

SUBMISSION_DETAILS_QUERY: Final = """
query submissionDetails($submissionId: Int!) {
  submissionDetails(submissionId: $submissionId) {
    runtime
    runtimeDisplay
    runtimePercentile
    memory
    memoryDisplay
    memoryPercentile
    code
    timestamp
    statusCode
    lang {
      name
      verboseName
    }
    question {
      questionId
      questionFrontendId
      titleSlug
    }
    topicTags {
      tagId
      slug
      name
    }
  }
}
""".strip()


def _default_config() -> LeetCodeConfig:
    return get_leetcode_config(cache_predicate=catalog_payload_is_complete)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class LeetCodeClient:
    """Structured access to LeetCode.

    Grading results are never cached; the catalog response goes through the
    configured response cache.
    """

    config: LeetCodeConfig = field(default_factory=_default_config)
    client_factory: ClientFactory = field(default=_default_client_factory)

    async def fetch_submission_details(self, submission_id: str) -> SubmissionDetails | None:
        try:
            numeric_id = int(submission_id)
        except ValueError as exc:
            raise SourceUnavailable(f"Invalid submission id: {submission_id!r}") from exc

        body = {
            "operationName": "submissionDetails",
            "query": SUBMISSION_DETAILS_QUERY,
            "variables": {"submissionId": numeric_id},
        }
        resilience = replace(self.config.resilience, cache=None)
        try:
            async with self.client_factory(resilience) as client:
                response = await client.post(
                    self.config.graphql_path,
                    json=body,
                    headers=self._session_headers(),
                )
                response.raise_for_status()
                payload = SubmissionDetailsResponse.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"LeetCode GraphQL request failed: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise SourceUnavailable(f"Unexpected LeetCode GraphQL payload: {exc}") from exc

        if payload.errors:
            messages = "; ".join(error.message for error in payload.errors)
            log.warning("GraphQL errors for submission %s: %s", submission_id, messages)
        if payload.data is None:
            return None
        return payload.data.submission_details

    async def fetch_catalog(self) -> CatalogResponse:
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.get(self.config.catalog_path)
                response.raise_for_status()
                return CatalogResponse.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise CatalogUnavailable(f"Difficulty catalog request failed: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise CatalogUnavailable(f"Unexpected difficulty catalog payload: {exc}") from exc

    def _session_headers(self) -> dict[str, str] | None:
        cookies = self.config.cookies
        if not cookies:
            return None
        headers = {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}
        if self.config.csrf_token:
            headers["X-CSRFToken"] = self.config.csrf_token
        return headers


@dataclass(slots=True)
class LeetCodeGradingSource:
    """``GradingResultSource`` backed by the GraphQL submission details query."""

    client: LeetCodeClient = field(default_factory=LeetCodeClient)

    async def fetch_result(self, submission_id: str) -> GradingPoll | None:
        details = await self.client.fetch_submission_details(submission_id)
        if details is None:
            return None
        return translate_submission(details, submission_id=submission_id)
