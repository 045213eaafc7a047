"""Difficulty catalog adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.domain.reconciliation import build_catalog_lookup

from .client import LeetCodeClient
from .translator import translate_catalog

if TYPE_CHECKING:
    from collections.abc import Mapping

    from codetally.domain.model import Tier

log = getLogger(__name__)


@dataclass(slots=True)
class DifficultyCatalogClient:
    """Fetch the canonical-id to tier mapping, at most once per sync pass.

    A failed or empty fetch raises ``CatalogUnavailable`` and leaves nothing
    cached, so a partial catalog is never handed to reconciliation.
    """

    client: LeetCodeClient = field(default_factory=LeetCodeClient)
    _cached: dict[str, Tier] | None = field(default=None, init=False, repr=False)

    async def fetch_catalog(self) -> Mapping[str, Tier]:
        if self._cached is not None:
            return self._cached
        payload = await self.client.fetch_catalog()
        lookup = build_catalog_lookup(translate_catalog(payload))
        log.info("Loaded difficulty catalog with %s problems", len(lookup))
        self._cached = lookup
        return lookup

    def reset(self) -> None:
        self._cached = None
