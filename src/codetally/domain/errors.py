"""Error taxonomy for capture and sync."""

from __future__ import annotations

from codetally.config.errors import ConfigurationError


class CodeTallyError(RuntimeError):
    """Base class for pipeline errors."""


class CaptureTimeout(CodeTallyError):
    """A polling budget ran out before the result resolved."""


class SourceUnavailable(CodeTallyError):
    """The structured result source was unreachable or returned no usable data."""


class CatalogUnavailable(CodeTallyError):
    """The difficulty catalog could not be fetched completely."""


class RepositoryUnreachable(CodeTallyError):
    """A repository listing failed; scoped to the path that failed."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class ConfigurationInvalid(CodeTallyError, ConfigurationError):
    """Repository coordinates or credentials are missing or malformed."""


class SyncAlreadyInProgress(CodeTallyError):
    """A full sync was requested while another pass is still running."""
