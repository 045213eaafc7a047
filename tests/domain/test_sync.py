from __future__ import annotations

import asyncio

import pytest

from codetally.domain.broadcast import StateBroadcaster
from codetally.domain.errors import SyncAlreadyInProgress
from codetally.domain.model import (
    RepositoryCoordinates,
    StatsSnapshot,
    SyncOutcome,
    Tier,
    TierCounts,
)
from codetally.domain.stats import StatsLedger
from codetally.domain.status import StatusStore
from codetally.domain.sync import SyncOrchestrator, SyncState
from tests.helpers.fakes import (
    FIXED_NOW,
    InMemoryStateStorage,
    StaticCatalogSource,
    StaticRepositorySource,
    repository_file,
)


def _orchestrator(
    status_store: StatusStore,
    ledger: StatsLedger,
    *,
    repository: StaticRepositorySource,
    catalog: StaticCatalogSource,
) -> SyncOrchestrator:
    return SyncOrchestrator(
        repository=repository,
        catalog_factory=lambda: catalog,
        store=status_store,
        ledger=ledger,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def linked_store(status_store: StatusStore) -> StatusStore:
    status_store.save_credentials(username="octocat", token="token")
    status_store.link_repository(RepositoryCoordinates("octocat", "leetcode"))
    return status_store


def test_successful_sync_settles_counts_and_records_status(
    linked_store: StatusStore, ledger: StatsLedger, broadcaster: StateBroadcaster
) -> None:
    received: list[StatsSnapshot] = []
    broadcaster.subscribe(received.append)
    repository = StaticRepositorySource(
        [repository_file("0001 two-sum.py"), repository_file("0002 add-two-numbers.py")]
    )
    catalog = StaticCatalogSource({"1": Tier.EASY, "2": Tier.MEDIUM})
    orchestrator = _orchestrator(linked_store, ledger, repository=repository, catalog=catalog)

    result = asyncio.run(orchestrator.run())

    assert result.success
    assert result.counts == TierCounts(easy=1, medium=1, hard=0)
    assert result.scanned_files == 2
    assert repository.scanned == [RepositoryCoordinates("octocat", "leetcode")]
    assert linked_store.load_counts() == (TierCounts(easy=1, medium=1), FIXED_NOW)
    status = linked_store.load_status()
    assert status.in_progress is False
    assert status.last_outcome is SyncOutcome.SUCCESS
    assert status.last_run_at == FIXED_NOW
    assert orchestrator.state is SyncState.IDLE
    assert len(received) == 1
    assert received[0].is_counting_complete


def test_catalog_failure_keeps_previous_counts(
    linked_store: StatusStore, ledger: StatsLedger
) -> None:
    linked_store.save_counts(TierCounts(easy=5, medium=4, hard=3))
    orchestrator = _orchestrator(
        linked_store,
        ledger,
        repository=StaticRepositorySource([repository_file("0001 two-sum.py")]),
        catalog=StaticCatalogSource(None),
    )

    result = asyncio.run(orchestrator.run())

    assert result.outcome is SyncOutcome.FAILED
    assert "catalog offline" in result.message
    assert linked_store.load_counts()[0] == TierCounts(easy=5, medium=4, hard=3)
    status = linked_store.load_status()
    assert status.in_progress is False
    assert status.last_outcome is SyncOutcome.FAILED
    assert status.last_message == result.message


def test_missing_repository_fails_the_pass(status_store: StatusStore, ledger: StatsLedger) -> None:
    repository = StaticRepositorySource()
    catalog = StaticCatalogSource({})
    orchestrator = _orchestrator(status_store, ledger, repository=repository, catalog=catalog)

    result = asyncio.run(orchestrator.run())

    assert result.outcome is SyncOutcome.FAILED
    assert repository.scanned == []
    assert catalog.fetches == 0
    assert status_store.load_status().last_outcome is SyncOutcome.FAILED


def test_unexpected_errors_are_recorded_not_raised(
    linked_store: StatusStore, ledger: StatsLedger
) -> None:
    class ExplodingRepository(StaticRepositorySource):
        async def scan(self, coordinates: RepositoryCoordinates) -> list[object]:
            raise KeyError("boom")

    orchestrator = _orchestrator(
        linked_store,
        ledger,
        repository=ExplodingRepository(),
        catalog=StaticCatalogSource({}),
    )

    result = asyncio.run(orchestrator.run())

    assert result.outcome is SyncOutcome.FAILED
    assert "boom" in result.message
    assert orchestrator.state is SyncState.IDLE


def test_store_failure_when_starting_returns_to_idle(
    linked_store: StatusStore, ledger: StatsLedger, state_storage: InMemoryStateStorage
) -> None:
    failures = [RuntimeError("database is locked")]

    class FlakyStore(StatusStore):
        def mark_in_progress(self) -> None:
            if failures:
                raise failures.pop()
            super().mark_in_progress()

    store = FlakyStore(state_storage)
    orchestrator = _orchestrator(
        store,
        ledger,
        repository=StaticRepositorySource([repository_file("0001 two-sum.py")]),
        catalog=StaticCatalogSource({"1": Tier.EASY}),
    )

    first = asyncio.run(orchestrator.run())

    assert first.outcome is SyncOutcome.FAILED
    assert "database is locked" in first.message
    assert orchestrator.state is SyncState.IDLE
    assert linked_store.load_status().last_outcome is SyncOutcome.FAILED

    second = asyncio.run(orchestrator.run())

    assert second.outcome is SyncOutcome.SUCCESS
    assert second.counts == TierCounts(easy=1)


def test_trigger_while_running_is_rejected(linked_store: StatusStore, ledger: StatsLedger) -> None:
    gate = asyncio.Event()

    class SlowCatalog(StaticCatalogSource):
        async def fetch_catalog(self) -> dict[str, Tier]:
            await gate.wait()
            return {"1": Tier.EASY}

    orchestrator = _orchestrator(
        linked_store,
        ledger,
        repository=StaticRepositorySource([repository_file("0001 two-sum.py")]),
        catalog=SlowCatalog(),
    )

    async def scenario() -> None:
        first = asyncio.create_task(orchestrator.run())
        await asyncio.sleep(0)
        assert orchestrator.running
        assert linked_store.load_status().in_progress is True
        with pytest.raises(SyncAlreadyInProgress):
            await orchestrator.run()
        gate.set()
        result = await first
        assert result.counts == TierCounts(easy=1)

    asyncio.run(scenario())

    assert linked_store.load_status().in_progress is False
