"""Domain port definitions for adapters."""

from __future__ import annotations

from .capture import CaptureContext, GradingPoll, GradingResultSource
from .fetching import CatalogSource, RepositorySource
from .persistence import StateRepository, StateUnitOfWork

__all__ = [
    "CaptureContext",
    "CatalogSource",
    "GradingPoll",
    "GradingResultSource",
    "RepositorySource",
    "StateRepository",
    "StateUnitOfWork",
]
