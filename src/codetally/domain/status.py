"""Persisted status, settled counts and credentials.

Every field is stored under its own key so readers can tell "no sync has
ever run" (no outcome, no ``counts.settled_at``) apart from "a sync is running"
(``sync.in_progress``).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from codetally.domain.model import (
    RepositoryCoordinates,
    SyncOutcome,
    SyncStatus,
    Tier,
    TierCounts,
)

if TYPE_CHECKING:
    from codetally.domain.ports import StateUnitOfWork

log = getLogger(__name__)

StateUnitOfWorkFactory = Callable[[], "StateUnitOfWork"]

SYNC_IN_PROGRESS: Final = "sync.in_progress"
SYNC_LAST_OUTCOME: Final = "sync.last_outcome"
SYNC_LAST_MESSAGE: Final = "sync.last_message"
SYNC_LAST_RUN_AT: Final = "sync.last_run_at"
COUNTS_SETTLED_AT: Final = "counts.settled_at"
GITHUB_USERNAME: Final = "github.username"
GITHUB_TOKEN: Final = "github.token"  # noqa: S105
GITHUB_REPOSITORY: Final = "github.repository"

SYNC_KEYS: Final = (SYNC_IN_PROGRESS, SYNC_LAST_OUTCOME, SYNC_LAST_MESSAGE, SYNC_LAST_RUN_AT)
COUNT_KEYS: Final = {tier: f"counts.{tier.value}" for tier in Tier}


@dataclass(frozen=True, slots=True)
class Credentials:
    username: str | None = None
    token: str | None = None
    repository: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.token and self.repository)

    def coordinates(self) -> RepositoryCoordinates:
        """Resolve the linked repository, raising ``ConfigurationInvalid`` if unusable."""

        return RepositoryCoordinates.parse(self.repository, default_owner=self.username)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        log.warning("Ignoring malformed timestamp in status store: %r", value)
        return None


def _parse_count(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return max(int(value), 0)
    except ValueError:
        log.warning("Ignoring malformed count in status store: %r", value)
        return 0


@dataclass(slots=True)
class StatusStore:
    unit_of_work_factory: StateUnitOfWorkFactory

    def load_status(self) -> SyncStatus:
        with self.unit_of_work_factory() as uow:
            values = uow.state.get_many(SYNC_KEYS)
        try:
            outcome = SyncOutcome(values.get(SYNC_LAST_OUTCOME) or SyncOutcome.NONE)
        except ValueError:
            outcome = SyncOutcome.NONE
        return SyncStatus(
            in_progress=values.get(SYNC_IN_PROGRESS) == "true",
            last_outcome=outcome,
            last_message=values.get(SYNC_LAST_MESSAGE) or "",
            last_run_at=_parse_datetime(values.get(SYNC_LAST_RUN_AT)),
        )

    def save_status(self, status: SyncStatus) -> None:
        self._write(
            {
                SYNC_IN_PROGRESS: "true" if status.in_progress else "false",
                SYNC_LAST_OUTCOME: status.last_outcome.value,
                SYNC_LAST_MESSAGE: status.last_message,
                SYNC_LAST_RUN_AT: status.last_run_at.isoformat() if status.last_run_at else None,
            }
        )

    def mark_in_progress(self) -> None:
        """Flip only the in-progress flag, leaving the previous outcome readable."""

        self._write({SYNC_IN_PROGRESS: "true"})

    def load_counts(self) -> tuple[TierCounts, datetime | None]:
        with self.unit_of_work_factory() as uow:
            values = uow.state.get_many((*COUNT_KEYS.values(), COUNTS_SETTLED_AT))
        counts = TierCounts(
            **{tier.value: _parse_count(values.get(key)) for tier, key in COUNT_KEYS.items()}
        )
        return counts, _parse_datetime(values.get(COUNTS_SETTLED_AT))

    def save_counts(self, counts: TierCounts, *, settled_at: datetime | None = None) -> None:
        values: dict[str, str | None] = {
            key: str(counts.get(tier)) for tier, key in COUNT_KEYS.items()
        }
        if settled_at is not None:
            values[COUNTS_SETTLED_AT] = settled_at.isoformat()
        self._write(values)

    def load_credentials(self) -> Credentials:
        with self.unit_of_work_factory() as uow:
            values = uow.state.get_many((GITHUB_USERNAME, GITHUB_TOKEN, GITHUB_REPOSITORY))
        return Credentials(
            username=values.get(GITHUB_USERNAME),
            token=values.get(GITHUB_TOKEN),
            repository=values.get(GITHUB_REPOSITORY),
        )

    def save_credentials(self, *, username: str, token: str) -> None:
        self._write({GITHUB_USERNAME: username, GITHUB_TOKEN: token})

    def link_repository(self, coordinates: RepositoryCoordinates) -> None:
        self._write({GITHUB_REPOSITORY: str(coordinates)})

    def unlink_repository(self) -> None:
        self._write({GITHUB_REPOSITORY: None})

    def clear(self) -> None:
        """Forget credentials, repository, counts and sync history."""

        with self.unit_of_work_factory() as uow:
            uow.state.remove(
                (
                    *SYNC_KEYS,
                    *COUNT_KEYS.values(),
                    COUNTS_SETTLED_AT,
                    GITHUB_USERNAME,
                    GITHUB_TOKEN,
                    GITHUB_REPOSITORY,
                )
            )
            uow.commit()

    def _write(self, values: dict[str, str | None]) -> None:
        with self.unit_of_work_factory() as uow:
            uow.state.set_many(values)
            uow.commit()
