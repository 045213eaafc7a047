"""Ports for reading remote repository and catalog state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from codetally.domain.model import RepositoryCoordinates, RepositoryFile, Tier


@runtime_checkable
class RepositorySource(Protocol):
    """Enumerates solution files; never raises, returns ``[]`` on failure."""

    async def scan(self, coordinates: RepositoryCoordinates) -> Sequence[RepositoryFile]: ...


@runtime_checkable
class CatalogSource(Protocol):
    """Fetches the complete identifier -> tier catalog or raises ``CatalogUnavailable``."""

    async def fetch_catalog(self) -> Mapping[str, Tier]: ...


__all__ = ["CatalogSource", "RepositorySource"]
