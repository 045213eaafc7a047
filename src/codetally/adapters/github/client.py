"""HTTP client for the GitHub repository contents API."""

from __future__ import annotations

import base64
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from codetally.adapters.http_resilience import ResilientClient
from codetally.config.github import GitHubConfig, get_github_config
from codetally.domain.errors import RepositoryUnreachable

from .schema import ContentEntry, ContentWriteResponse

if TYPE_CHECKING:
    from codetally.adapters.http_resilience import ClientFactory
    from codetally.config.http_resilience import ResilienceConfig
    from codetally.domain.model import RepositoryCoordinates

log = getLogger(__name__)

TokenProvider = Callable[[], str | None]

_LISTING = TypeAdapter(list[ContentEntry])


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _no_token() -> str | None:
    return None


def contents_url(coordinates: RepositoryCoordinates, path: str = "") -> str:
    base = f"repos/{quote(coordinates.owner)}/{quote(coordinates.name)}/contents"
    path = path.strip("/")
    return f"{base}/{quote(path)}" if path else base


@dataclass(slots=True)
class GitHubContentsClient:
    """Lists and writes repository contents.

    The token is looked up on every request so that credentials saved after
    start-up take effect without rebuilding the client.
    """

    config: GitHubConfig = field(default_factory=get_github_config)
    token_provider: TokenProvider = _no_token
    client_factory: ClientFactory = field(default=_default_client_factory)

    def _headers(self) -> dict[str, str] | None:
        token = self.token_provider()
        if not token:
            return None
        return {"Authorization": f"Bearer {token}"}

    async def list_directory(
        self,
        coordinates: RepositoryCoordinates,
        path: str = "",
        *,
        client: ResilientClient | None = None,
    ) -> list[ContentEntry]:
        """Return the entries directly under ``path``.

        Raises ``RepositoryUnreachable`` scoped to ``path`` on any failure.
        """

        if client is None:
            async with self.client_factory(self.config.resilience) as owned:
                return await self.list_directory(coordinates, path, client=owned)

        try:
            response = await client.get(contents_url(coordinates, path), headers=self._headers())
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise RepositoryUnreachable(
                f"Listing {coordinates}/{path} failed: {exc}", path=path
            ) from exc
        except ValueError as exc:
            raise RepositoryUnreachable(
                f"Listing {coordinates}/{path} returned invalid JSON", path=path
            ) from exc

        if not isinstance(payload, list):
            # A file path returns a single object rather than a listing.
            raise RepositoryUnreachable(f"{coordinates}/{path} is not a directory", path=path)
        try:
            return _LISTING.validate_python(payload)
        except ValidationError as exc:
            raise RepositoryUnreachable(
                f"Unexpected listing payload for {coordinates}/{path}: {exc}", path=path
            ) from exc

    async def get_file_sha(
        self, client: ResilientClient, coordinates: RepositoryCoordinates, path: str
    ) -> str | None:
        """Return the blob sha of ``path`` or ``None`` when the file does not exist."""

        try:
            response = await client.get(contents_url(coordinates, path), headers=self._headers())
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
            entry = ContentEntry.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise RepositoryUnreachable(f"Reading {coordinates}/{path} failed: {exc}", path=path) from exc
        except (ValidationError, ValueError) as exc:
            raise RepositoryUnreachable(
                f"Unexpected payload for {coordinates}/{path}: {exc}", path=path
            ) from exc
        return entry.sha

    async def put_file(
        self,
        coordinates: RepositoryCoordinates,
        path: str,
        content: str,
        *,
        message: str,
    ) -> ContentWriteResponse:
        """Create or replace ``path`` with ``content``."""

        async with self.client_factory(self.config.resilience) as client:
            sha = await self.get_file_sha(client, coordinates, path)
            body: dict[str, object] = {
                "message": message,
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            }
            if sha is not None:
                body["sha"] = sha
            if self.config.commit_author and self.config.commit_email:
                body["committer"] = {
                    "name": self.config.commit_author,
                    "email": self.config.commit_email,
                }
            try:
                response = await client.put(
                    contents_url(coordinates, path), json=body, headers=self._headers()
                )
                response.raise_for_status()
                return ContentWriteResponse.model_validate(response.json())
            except httpx.HTTPError as exc:
                raise RepositoryUnreachable(
                    f"Writing {coordinates}/{path} failed: {exc}", path=path
                ) from exc
            except (ValidationError, ValueError) as exc:
                raise RepositoryUnreachable(
                    f"Unexpected write response for {coordinates}/{path}: {exc}", path=path
                ) from exc
