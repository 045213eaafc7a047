"""Application wiring and use cases shared by the CLI and the message router."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.adapters.github import GitHubContentsClient, RepositoryScanner, SolutionPublisher
from codetally.adapters.http_resilience import ResilientClient
from codetally.adapters.leetcode import (
    DifficultyCatalogClient,
    LeetCodeClient,
    LeetCodeGradingSource,
    default_extractor_chain,
)
from codetally.adapters.leetcode.translator import catalog_payload_is_complete
from codetally.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    is_started,
    startup,
)
from codetally.config import (
    GitHubConfig,
    LeetCodeConfig,
    PollingConfig,
    SyncConfig,
    get_github_config,
    get_leetcode_config,
    get_polling_config,
    get_sync_config,
    optional_env_var,
)
from codetally.domain.broadcast import StateBroadcaster
from codetally.domain.capture import SubmissionPoller
from codetally.domain.errors import CatalogUnavailable, RepositoryUnreachable
from codetally.domain.model import RepositoryCoordinates, Tier
from codetally.domain.stats import StatsLedger
from codetally.domain.status import StatusStore
from codetally.domain.sync import SyncOrchestrator

if TYPE_CHECKING:
    from codetally.adapters.http_resilience import ClientFactory
    from codetally.domain.model import StatsSnapshot, SubmissionRecord
    from codetally.domain.polling import Sleep
    from codetally.domain.ports import CaptureContext, CatalogSource
    from codetally.domain.status import StateUnitOfWorkFactory
    from codetally.domain.sync import SyncResult

log = getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    """Everything one running instance needs, built once and passed around."""

    store: StatusStore
    broadcaster: StateBroadcaster
    ledger: StatsLedger
    orchestrator: SyncOrchestrator
    poller: SubmissionPoller
    publisher: SolutionPublisher
    catalog_factory: Callable[[], CatalogSource]
    leetcode: LeetCodeConfig
    github: GitHubConfig
    sync: SyncConfig


@dataclass(frozen=True, slots=True)
class CaptureResult:
    record: SubmissionRecord
    tier: Tier | None = None
    counted: bool = False
    published_path: str | None = None


def build_app_context(
    *,
    unit_of_work_factory: StateUnitOfWorkFactory | None = None,
    leetcode_config: LeetCodeConfig | None = None,
    github_config: GitHubConfig | None = None,
    polling_config: PollingConfig | None = None,
    sync_config: SyncConfig | None = None,
    leetcode_client_factory: ClientFactory = ResilientClient,
    github_client_factory: ClientFactory = ResilientClient,
    sleep: Sleep = asyncio.sleep,
) -> AppContext:
    """Wire configuration, adapters and domain services together.

    Without an explicit ``unit_of_work_factory`` the SQLite status store is
    started on first use.
    """

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyStateUnitOfWork

    leetcode = leetcode_config or get_leetcode_config(cache_predicate=catalog_payload_is_complete)
    github = github_config or get_github_config()
    sync = sync_config or get_sync_config()

    store = StatusStore(unit_of_work_factory)
    broadcaster = StateBroadcaster()
    ledger = StatsLedger(store=store, broadcaster=broadcaster)

    def github_token() -> str | None:
        return store.load_credentials().token or optional_env_var("GITHUB_TOKEN")

    leetcode_client = LeetCodeClient(config=leetcode, client_factory=leetcode_client_factory)
    contents = GitHubContentsClient(
        config=github, token_provider=github_token, client_factory=github_client_factory
    )

    def catalog_factory() -> CatalogSource:
        return DifficultyCatalogClient(client=leetcode_client)

    orchestrator = SyncOrchestrator(
        repository=RepositoryScanner(contents=contents),
        catalog_factory=catalog_factory,
        store=store,
        ledger=ledger,
    )
    poller = SubmissionPoller(
        source=LeetCodeGradingSource(client=leetcode_client),
        fallback=default_extractor_chain(),
        config=polling_config or get_polling_config(),
        sleep=sleep,
    )
    return AppContext(
        store=store,
        broadcaster=broadcaster,
        ledger=ledger,
        orchestrator=orchestrator,
        poller=poller,
        publisher=SolutionPublisher(contents=contents, config=sync),
        catalog_factory=catalog_factory,
        leetcode=leetcode,
        github=github,
        sync=sync,
    )


async def run_sync(context: AppContext) -> SyncResult:
    return await context.orchestrator.run()


async def capture_submission(
    context: AppContext,
    capture_context: CaptureContext,
    *,
    publish: bool = False,
) -> CaptureResult:
    """Capture one submission, optionally publish it, and count it if accepted."""

    record = await context.poller.capture(capture_context)
    if not record.accepted:
        log.info("Submission %s was not accepted (%s)", record.submission_id, record.status)
        return CaptureResult(record=record)

    published_path: str | None = None
    if publish:
        try:
            coordinates = context.store.load_credentials().coordinates()
            response = await context.publisher.publish(record, coordinates)
        except RepositoryUnreachable as exc:
            log.warning("Publishing submission %s failed: %s", record.submission_id, exc)
        else:
            if response is not None and response.content is not None:
                published_path = response.content.path

    tier = await _lookup_tier(context, record.canonical_id)
    counted = context.ledger.record_capture(tier) if tier is not None else False
    return CaptureResult(record=record, tier=tier, counted=counted, published_path=published_path)


async def _lookup_tier(context: AppContext, canonical_id: str | None) -> Tier | None:
    if canonical_id is None:
        return None
    try:
        catalog = await context.catalog_factory().fetch_catalog()
    except CatalogUnavailable as exc:
        log.warning("Cannot classify problem %s: %s", canonical_id, exc)
        return None
    return catalog.get(canonical_id)


def report_capture(context: AppContext, difficulty: object) -> bool:
    return context.ledger.record_capture(difficulty)


def current_stats(context: AppContext) -> StatsSnapshot:
    return context.ledger.snapshot()


def save_credentials(context: AppContext, *, username: str, token: str) -> None:
    context.store.save_credentials(username=username.strip(), token=token.strip())
    log.info("Saved GitHub credentials for %s", username)


def link_repository(context: AppContext, repository: str) -> RepositoryCoordinates:
    """Parse and persist the repository to count solutions from."""

    credentials = context.store.load_credentials()
    coordinates = RepositoryCoordinates.parse(repository, default_owner=credentials.username)
    context.store.link_repository(coordinates)
    log.info("Linked repository %s", coordinates)
    return coordinates


def unlink_repository(context: AppContext) -> None:
    context.store.unlink_repository()
    log.info("Unlinked repository")


def logout(context: AppContext) -> None:
    context.store.clear()
    context.ledger.reload()
    log.info("Cleared stored credentials and counts")


def shared_configuration(context: AppContext) -> dict[str, object]:
    """Non-secret settings other contexts need; the token is never included."""

    credentials = context.store.load_credentials()
    return {
        "leetcode_url": context.leetcode.resilience.base_url,
        "github_api_url": context.github.resilience.base_url,
        "username": credentials.username,
        "repository": credentials.repository,
        "has_token": bool(credentials.token),
        "code_submit": context.sync.code_submit,
        "auto_sync": context.sync.auto_sync,
    }
