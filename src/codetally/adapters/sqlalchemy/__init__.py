"""SQLAlchemy adapter package for the status record."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, state_entry_table
from .repositories import SqlAlchemyStateRepository
from .unit_of_work import SqlAlchemyStateUnitOfWork, is_started, shutdown, startup

__all__ = [
    "SqlAlchemyStateRepository",
    "SqlAlchemyStateUnitOfWork",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
    "state_entry_table",
]
