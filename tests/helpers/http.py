"""httpx MockTransport plumbing for adapter tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from codetally.adapters.http_resilience import ResilientClient
from codetally.config.http_resilience import ResilienceConfig

Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            headers=dict(resilience.default_headers or {}),
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def failing_factory(exc: Exception) -> Callable[[ResilienceConfig], ResilientClient]:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise exc

    return make_client_factory(handler)
