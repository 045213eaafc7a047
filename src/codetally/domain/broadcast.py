"""Best-effort fan-out of state snapshots to observers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codetally.domain.model import StatsSnapshot

log = getLogger(__name__)

Subscriber = Callable[["StatsSnapshot"], object]


@dataclass(slots=True)
class Subscription:
    """Handle returned by ``StateBroadcaster.subscribe``."""

    broadcaster: StateBroadcaster
    handle: int
    name: str

    def cancel(self) -> None:
        self.broadcaster.unsubscribe(self)


@dataclass(slots=True)
class StateBroadcaster:
    """Registry of subscriber callbacks.

    Delivery is isolated per subscriber: a subscriber that raises is logged and
    skipped, and publishing never fails because nobody is listening.
    """

    _subscribers: dict[int, tuple[str, Subscriber]] = field(
        default_factory=dict[int, tuple[str, Subscriber]]
    )
    _handles: count[int] = field(default_factory=count)

    def subscribe(self, callback: Subscriber, *, name: str | None = None) -> Subscription:
        handle = next(self._handles)
        label = name or getattr(callback, "__qualname__", repr(callback))
        self._subscribers[handle] = (label, callback)
        return Subscription(broadcaster=self, handle=handle, name=label)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscribers.pop(subscription.handle, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, snapshot: StatsSnapshot) -> int:
        """Deliver ``snapshot`` to every subscriber; return the number of successes."""

        delivered = 0
        for label, callback in list(self._subscribers.values()):
            try:
                callback(snapshot)
            except Exception:
                log.exception("Failed to deliver state update to %s", label)
                continue
            delivered += 1
        return delivered
