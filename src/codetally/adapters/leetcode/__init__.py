"""LeetCode adapter package."""

from __future__ import annotations

from .catalog import DifficultyCatalogClient
from .client import LeetCodeClient, LeetCodeGradingSource
from .context import StaticCaptureContext
from .extraction import default_extractor_chain

__all__ = [
    "DifficultyCatalogClient",
    "LeetCodeClient",
    "LeetCodeGradingSource",
    "StaticCaptureContext",
    "default_extractor_chain",
]
