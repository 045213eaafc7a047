"""Ports for the persisted status record."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType


@runtime_checkable
class StateRepository(Protocol):
    """Flat key/value storage; each status field lives under its own key."""

    def get(self, key: str) -> str | None: ...

    def get_many(self, keys: Iterable[str]) -> dict[str, str]: ...

    def set_many(self, values: Mapping[str, str | None]) -> None: ...

    def remove(self, keys: Iterable[str]) -> None: ...


@runtime_checkable
class StateUnitOfWork(Protocol):
    """Transaction boundary around a ``StateRepository``."""

    @property
    def state(self) -> StateRepository: ...

    def __enter__(self) -> StateUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
