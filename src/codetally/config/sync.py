"""Synchronization and capture behaviour switches."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var


def _flag(name: str, *, default: bool) -> bool:
    value = optional_env_var(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class SyncConfig:
    code_submit: bool = True
    auto_sync: bool = True


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        code_submit=_flag("CODETALLY_CODE_SUBMIT", default=True),
        auto_sync=_flag("CODETALLY_AUTO_SYNC", default=True),
    )
