"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select

from codetally.adapters.sqlalchemy.mappings import state_entry_table

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy.orm import Session


class SqlAlchemyStateRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> str | None:
        stmt = select(state_entry_table.c.value).where(state_entry_table.c.key == key)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_many(self, keys: Iterable[str]) -> dict[str, str]:
        wanted = list(keys)
        if not wanted:
            return {}
        stmt = select(state_entry_table.c.key, state_entry_table.c.value).where(
            state_entry_table.c.key.in_(wanted)
        )
        return {row.key: row.value for row in self.session.execute(stmt)}

    def set_many(self, values: Mapping[str, str | None]) -> None:
        """Write every key in ``values``; a ``None`` value deletes the key."""

        if not values:
            return
        self.remove(values.keys())
        now = datetime.now(UTC)
        rows = [
            {"key": key, "value": value, "updated_at": now}
            for key, value in values.items()
            if value is not None
        ]
        if rows:
            self.session.execute(insert(state_entry_table), rows)

    def remove(self, keys: Iterable[str]) -> None:
        doomed = list(keys)
        if doomed:
            self.session.execute(delete(state_entry_table).where(state_entry_table.c.key.in_(doomed)))
