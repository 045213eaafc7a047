"""LeetCode configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy, ShouldCacheHook

LEETCODE_BASE_URL = "https://leetcode.com/"
LEETCODE_GRAPHQL_PATH = "graphql"
LEETCODE_CATALOG_PATH = "api/problems/all/"
LEETCODE_TIMEOUT_SECONDS = 20.0
# A cached catalog must not outlive one sync pass.
LEETCODE_CATALOG_TTL_SECONDS = 60.0
LEETCODE_USER_AGENT = "Mozilla/5.0 (compatible; codetally/1.0)"


@dataclass(frozen=True, slots=True)
class LeetCodeConfig:
    """Holds LeetCode endpoint configuration and the optional session cookies."""

    resilience: ResilienceConfig
    session_cookie: str | None = None
    csrf_token: str | None = None
    graphql_path: str = LEETCODE_GRAPHQL_PATH
    catalog_path: str = LEETCODE_CATALOG_PATH

    @property
    def cookies(self) -> dict[str, str]:
        cookies: dict[str, str] = {}
        if self.session_cookie:
            cookies["LEETCODE_SESSION"] = self.session_cookie
        if self.csrf_token:
            cookies["csrftoken"] = self.csrf_token
        return cookies


def get_leetcode_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> LeetCodeConfig:
    # One retry only: the capture poller owns the retry budget for grading results.
    return LeetCodeConfig(
        resilience=resilience
        or ResilienceConfig(
            name="leetcode",
            base_url=optional_env_var("LEETCODE_BASE_URL") or LEETCODE_BASE_URL,
            timeout_seconds=LEETCODE_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=1),
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            cache=CacheConfig(
                backend="memory",
                default_ttl_seconds=env_float(
                    "CODETALLY_CATALOG_TTL", LEETCODE_CATALOG_TTL_SECONDS
                ),
                should_cache=cache_predicate,
            ),
            default_headers={
                "User-Agent": LEETCODE_USER_AGENT,
                "Referer": LEETCODE_BASE_URL,
            },
        ),
        session_cookie=optional_env_var("LEETCODE_SESSION"),
        csrf_token=optional_env_var("LEETCODE_CSRF_TOKEN"),
    )
