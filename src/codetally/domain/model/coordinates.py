"""Repository coordinate parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from codetally.domain.errors import ConfigurationInvalid

_GITHUB_URL = re.compile(r"^https?://github\.com/([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")
_SLUG = re.compile(r"^([^/\s]+)/([^/\s]+)$")
_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass(frozen=True, slots=True)
class RepositoryCoordinates:
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str | None, *, default_owner: str | None = None) -> RepositoryCoordinates:
        """Parse ``owner/name``, a github.com URL or a bare repository name.

        A bare name is resolved against ``default_owner`` (the authenticated user).
        """

        text = (value or "").strip()
        if not text:
            raise ConfigurationInvalid("No repository configured")

        match = _GITHUB_URL.match(text) or _SLUG.match(text)
        if match:
            owner, name = match.group(1).strip(), match.group(2).strip()
        else:
            owner, name = (default_owner or "").strip(), text

        if not owner:
            raise ConfigurationInvalid(f"Repository {text!r} has no owner and no username is stored")
        if not _NAME.match(owner) or not _NAME.match(name):
            raise ConfigurationInvalid(f"Malformed repository coordinates: {text!r}")
        return cls(owner=owner, name=name)
