"""GitHub configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

GITHUB_API_URL = "https://api.github.com/"
GITHUB_TIMEOUT_SECONDS = 15.0
GITHUB_DEFAULT_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Holds GitHub contents-API configuration values."""

    resilience: ResilienceConfig
    commit_author: str | None = None
    commit_email: str | None = None


def get_github_config(*, resilience: ResilienceConfig | None = None) -> GitHubConfig:
    # Directory listings change on every push, so the contents API is never cached.
    return GitHubConfig(
        resilience=resilience
        or ResilienceConfig(
            name="github",
            base_url=optional_env_var("GITHUB_API_URL") or GITHUB_API_URL,
            timeout_seconds=GITHUB_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=None,
            default_headers=GITHUB_DEFAULT_HEADERS,
        ),
        commit_author=optional_env_var("CODETALLY_COMMIT_AUTHOR"),
        commit_email=optional_env_var("CODETALLY_COMMIT_EMAIL"),
    )
