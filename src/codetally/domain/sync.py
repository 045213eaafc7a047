"""Full reconciliation pass and its run status."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.domain.errors import (
    CatalogUnavailable,
    ConfigurationInvalid,
    SyncAlreadyInProgress,
)
from codetally.domain.model import SyncOutcome, SyncStatus, TierCounts
from codetally.domain.reconciliation import reconcile

if TYPE_CHECKING:
    from codetally.domain.ports import CatalogSource, RepositorySource
    from codetally.domain.stats import StatsLedger
    from codetally.domain.status import StatusStore

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SyncState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one pass, as recorded in the status store."""

    outcome: SyncOutcome
    message: str
    counts: TierCounts
    scanned_files: int = 0

    @property
    def success(self) -> bool:
        return self.outcome is SyncOutcome.SUCCESS


@dataclass(slots=True)
class SyncOrchestrator:
    """Run one reconciliation pass at a time: ``IDLE -> RUNNING -> IDLE``.

    Hard failures (invalid repository coordinates, unavailable catalog) end the
    pass as FAILED and are recorded in the status store instead of being raised;
    the previously settled counts stay untouched.
    """

    repository: RepositorySource
    catalog_factory: Callable[[], CatalogSource]
    store: StatusStore
    ledger: StatsLedger
    clock: Callable[[], datetime] = _utcnow
    _state: SyncState = field(default=SyncState.IDLE, init=False)

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is SyncState.RUNNING

    async def run(self) -> SyncResult:
        if self.running:
            raise SyncAlreadyInProgress("A sync pass is already running")

        self._state = SyncState.RUNNING
        log.info("Starting full sync")

        outcome = SyncOutcome.FAILED
        message = "Sync aborted"
        scanned = 0
        try:
            self.store.mark_in_progress()
            coordinates = self.store.load_credentials().coordinates()
            catalog_source = self.catalog_factory()
            files, catalog = await asyncio.gather(
                self.repository.scan(coordinates),
                catalog_source.fetch_catalog(),
            )
            scanned = len(files)
            counts = reconcile(files, catalog)
            self.ledger.settle(counts)
            outcome = SyncOutcome.SUCCESS
            message = (
                f"Counted {counts.total} of {scanned} files in {coordinates}"
                f" (easy={counts.easy}, medium={counts.medium}, hard={counts.hard})"
            )
        except (ConfigurationInvalid, CatalogUnavailable) as exc:
            message = str(exc)
            log.error("Sync failed: %s", message)
        except Exception as exc:
            message = f"Unexpected error during sync: {exc}"
            log.exception("Unexpected error during sync")
        finally:
            self._state = SyncState.IDLE
            status = SyncStatus(
                in_progress=False,
                last_outcome=outcome,
                last_message=message,
                last_run_at=self.clock(),
            )
            self.store.save_status(status)
            self.ledger.publish(status)

        log.info("Finished full sync (%s): %s", outcome, message)
        return SyncResult(
            outcome=outcome,
            message=message,
            counts=self.ledger.counts,
            scanned_files=scanned,
        )
