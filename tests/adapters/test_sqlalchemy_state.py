"""Exercise the SQLAlchemy-backed status record."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from codetally.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from codetally.domain.model import RepositoryCoordinates, SyncOutcome, SyncStatus, TierCounts
from codetally.domain.status import StatusStore

UnitOfWorkFactory = Callable[[], SqlAlchemyStateUnitOfWork]


def test_state_repository_writes_reads_and_deletes(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.state.set_many({"a": "1", "b": "2"})
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.state.get("a") == "1"
        assert uow.state.get_many(["a", "b", "c"]) == {"a": "1", "b": "2"}
        uow.state.set_many({"a": "10", "b": None})
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.state.get_many(["a", "b"]) == {"a": "10"}
        uow.state.remove(["a"])
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.state.get("a") is None


def test_uncommitted_changes_are_rolled_back(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.state.set_many({"kept": "no"})

    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.state.set_many({"kept": "still no"})
        raise RuntimeError("abort")

    with sqlite_unit_of_work() as uow:
        assert uow.state.get("kept") is None


def test_status_store_round_trips_through_sqlite(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    store = StatusStore(sqlite_unit_of_work)
    run_at = datetime(2025, 1, 2, 3, 4, tzinfo=UTC)

    store.save_status(
        SyncStatus(last_outcome=SyncOutcome.SUCCESS, last_message="Counted 3", last_run_at=run_at)
    )
    store.save_counts(TierCounts(easy=1, medium=1, hard=1), settled_at=run_at)
    store.save_credentials(username="octocat", token="token")
    store.link_repository(RepositoryCoordinates("octocat", "leetcode"))

    assert store.load_status() == SyncStatus(
        last_outcome=SyncOutcome.SUCCESS, last_message="Counted 3", last_run_at=run_at
    )
    assert store.load_counts() == (TierCounts(easy=1, medium=1, hard=1), run_at)
    assert store.load_credentials().coordinates() == RepositoryCoordinates("octocat", "leetcode")


def test_unit_of_work_requires_startup() -> None:
    shutdown()
    assert not is_started()

    with pytest.raises(StartupError):
        SqlAlchemyStateUnitOfWork()


def test_startup_twice_requires_force(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    _ = sqlite_unit_of_work
    with pytest.raises(StartupError, match="force=True"):
        startup(database_uri="sqlite+pysqlite:///:memory:")
