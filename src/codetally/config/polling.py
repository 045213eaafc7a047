"""Polling budgets for submission capture."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_LOCATION_ATTEMPTS = 20
DEFAULT_LOCATION_INTERVAL_SECONDS = 0.5
DEFAULT_SETTLE_DELAY_SECONDS = 2.0
DEFAULT_RESULT_ATTEMPTS = 10
DEFAULT_RESULT_INTERVAL_SECONDS = 1.0


@dataclass(frozen=True, slots=True)
class PollingConfig:
    location_attempts: int = DEFAULT_LOCATION_ATTEMPTS
    location_interval: float = DEFAULT_LOCATION_INTERVAL_SECONDS
    settle_delay: float = DEFAULT_SETTLE_DELAY_SECONDS
    result_attempts: int = DEFAULT_RESULT_ATTEMPTS
    result_interval: float = DEFAULT_RESULT_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.location_attempts < 1 or self.result_attempts < 1:
            raise ValueError("Polling attempt ceilings must be at least 1")
        if min(self.location_interval, self.settle_delay, self.result_interval) < 0:
            raise ValueError("Polling delays must be non-negative")


def get_polling_config() -> PollingConfig:
    return PollingConfig(
        location_attempts=env_int("CODETALLY_LOCATION_ATTEMPTS", DEFAULT_LOCATION_ATTEMPTS),
        location_interval=env_float(
            "CODETALLY_LOCATION_INTERVAL", DEFAULT_LOCATION_INTERVAL_SECONDS
        ),
        settle_delay=env_float("CODETALLY_SETTLE_DELAY", DEFAULT_SETTLE_DELAY_SECONDS),
        result_attempts=env_int("CODETALLY_RESULT_ATTEMPTS", DEFAULT_RESULT_ATTEMPTS),
        result_interval=env_float("CODETALLY_RESULT_INTERVAL", DEFAULT_RESULT_INTERVAL_SECONDS),
    )
