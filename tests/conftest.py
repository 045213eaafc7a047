from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from codetally.adapters.sqlalchemy import create_all_tables
from codetally.adapters.sqlalchemy.unit_of_work import SqlAlchemyStateUnitOfWork, shutdown, startup
from codetally.domain.broadcast import StateBroadcaster
from codetally.domain.stats import StatsLedger
from codetally.domain.status import StatusStore
from tests.helpers.fakes import FIXED_NOW, InMemoryStateStorage, RecordingSleep

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyStateUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyStateUnitOfWork:
        return SqlAlchemyStateUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def state_storage() -> InMemoryStateStorage:
    return InMemoryStateStorage()


@pytest.fixture
def status_store(state_storage: InMemoryStateStorage) -> StatusStore:
    return StatusStore(state_storage)


@pytest.fixture
def broadcaster() -> StateBroadcaster:
    return StateBroadcaster()


@pytest.fixture
def ledger(status_store: StatusStore, broadcaster: StateBroadcaster) -> StatsLedger:
    return StatsLedger(store=status_store, broadcaster=broadcaster, clock=lambda: FIXED_NOW)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
