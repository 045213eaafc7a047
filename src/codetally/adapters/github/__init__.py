"""GitHub adapter package."""

from __future__ import annotations

from .client import GitHubContentsClient
from .publisher import SolutionPublisher
from .scanner import RepositoryScanner

__all__ = ["GitHubContentsClient", "RepositoryScanner", "SolutionPublisher"]
