"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationValue, MissingConfigurationError
from .github import GitHubConfig, get_github_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .leetcode import LeetCodeConfig, get_leetcode_config
from .logging import configure_logging
from .polling import PollingConfig, get_polling_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "GitHubConfig",
    "InvalidConfigurationValue",
    "LeetCodeConfig",
    "MissingConfigurationError",
    "PollingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_database_config",
    "get_github_config",
    "get_leetcode_config",
    "get_polling_config",
    "get_storage_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
