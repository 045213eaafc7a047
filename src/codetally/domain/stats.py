"""Tier counts shown to observers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.domain.model import StatsSnapshot, SyncStatus, Tier, TierCounts

if TYPE_CHECKING:
    from codetally.domain.broadcast import StateBroadcaster
    from codetally.domain.status import StatusStore

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class StatsLedger:
    """Settled counts plus optimistic single-capture increments.

    ``settle`` is reserved for the sync orchestrator, which replaces the counts
    wholesale after each successful pass. ``record_capture`` adds exactly one
    solution between passes.
    """

    store: StatusStore
    broadcaster: StateBroadcaster
    clock: Callable[[], datetime] = _utcnow
    _counts: TierCounts | None = field(default=None, init=False)
    _last_update: datetime | None = field(default=None, init=False)

    @property
    def counts(self) -> TierCounts:
        if self._counts is None:
            self._counts, self._last_update = self.store.load_counts()
        return self._counts

    def snapshot(self, status: SyncStatus | None = None) -> StatsSnapshot:
        counts = self.counts
        return StatsSnapshot(
            counts=counts,
            status=status or self.store.load_status(),
            last_update=self._last_update,
        )

    def reload(self) -> None:
        """Drop cached counts so the next read comes from the store."""

        self._counts = None
        self._last_update = None

    def settle(self, counts: TierCounts) -> None:
        now = self.clock()
        self.store.save_counts(counts, settled_at=now)
        self._counts = counts
        self._last_update = now
        log.info(
            "Settled counts: easy=%s, medium=%s, hard=%s",
            counts.easy,
            counts.medium,
            counts.hard,
        )

    def record_capture(self, difficulty: object) -> bool:
        """Count one newly solved problem; ``False`` for an unknown tier."""

        tier = Tier.parse(difficulty)
        if tier is None:
            log.warning("Ignoring capture with unknown difficulty %r", difficulty)
            return False
        counts = self.counts.incremented(tier)
        self.store.save_counts(counts)
        self._counts = counts
        self._last_update = self.clock()
        self.publish()
        return True

    def publish(self, status: SyncStatus | None = None) -> int:
        return self.broadcaster.publish(self.snapshot(status))
