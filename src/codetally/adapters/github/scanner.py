"""Enumerate solution files in a linked GitHub repository."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from codetally.domain.errors import RepositoryUnreachable
from codetally.domain.reconciliation import parse_repository_file

from .client import GitHubContentsClient

if TYPE_CHECKING:
    from codetally.adapters.http_resilience import ResilientClient
    from codetally.domain.model import RepositoryCoordinates, RepositoryFile

    from .schema import ContentEntry

log = getLogger(__name__)


@dataclass(slots=True)
class RepositoryScanner:
    """List ``<language folder>/<NNNN name.ext>`` files.

    Top-level directories are treated as language folders without validating
    their names. A failing folder contributes nothing; a failing top-level
    listing yields an empty result. Nothing is raised.
    """

    contents: GitHubContentsClient = field(default_factory=GitHubContentsClient)

    async def scan(self, coordinates: RepositoryCoordinates) -> list[RepositoryFile]:
        async with self.contents.client_factory(self.contents.config.resilience) as client:
            try:
                top_level = await self.contents.list_directory(coordinates, client=client)
            except RepositoryUnreachable as exc:
                log.error("Could not list repository %s: %s", coordinates, exc)
                return []

            folders = [entry for entry in top_level if entry.is_dir]
            listings = await asyncio.gather(
                *(self._scan_folder(client, coordinates, folder) for folder in folders)
            )

        files = [repository_file for listing in listings for repository_file in listing]
        log.info(
            "Scanned %s: %s solution files in %s folders", coordinates, len(files), len(folders)
        )
        return files

    async def _scan_folder(
        self,
        client: ResilientClient,
        coordinates: RepositoryCoordinates,
        folder: ContentEntry,
    ) -> list[RepositoryFile]:
        try:
            entries = await self.contents.list_directory(coordinates, folder.path, client=client)
        except RepositoryUnreachable as exc:
            log.warning("Skipping folder %s: %s", exc.path or folder.path, exc)
            return []

        files: list[RepositoryFile] = []
        for entry in entries:
            if not entry.is_file:
                continue
            repository_file = parse_repository_file(entry.name, folder.name)
            if repository_file is None:
                log.debug("Ignoring %s/%s", folder.name, entry.name)
                continue
            files.append(repository_file)
        return files
