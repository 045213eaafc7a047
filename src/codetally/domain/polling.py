"""Bounded fixed-interval retry combinator.

Both capture loops (waiting for the submission location and waiting for the
grading result) share this helper so the retry policy lives in one place.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import TypeVar

from codetally.domain.errors import CaptureTimeout

log = getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class PollingExhausted(CaptureTimeout):
    """Raised when every attempt of a poll returned nothing."""

    def __init__(self, label: str, attempts: int) -> None:
        super().__init__(f"{label}: no result after {attempts} attempts")
        self.label = label
        self.attempts = attempts


async def poll(
    probe: Callable[[int], Awaitable[T | None]],
    *,
    max_attempts: int,
    interval: float,
    label: str = "poll",
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Call ``probe`` until it returns a value or the attempt ceiling is hit.

    ``probe`` receives the 1-based attempt number. Returning ``None`` means "not
    yet"; any exception it raises aborts the loop immediately. The delay is only
    awaited between attempts, so the worst case is ``(max_attempts - 1) * interval``
    plus the probe time.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        result = await probe(attempt)
        if result is not None:
            log.debug("%s resolved on attempt %s/%s", label, attempt, max_attempts)
            return result
        if attempt < max_attempts:
            log.debug("%s pending (attempt %s/%s)", label, attempt, max_attempts)
            await sleep(interval)

    log.info("%s exhausted after %s attempts", label, max_attempts)
    raise PollingExhausted(label, max_attempts)
