"""Cross-context message protocol.

Messages are plain mappings with a ``type`` field. ``MessageRouter.dispatch``
validates them with pydantic and always answers with a mapping; handler
failures become ``{"status": "failed", "error": ...}`` responses.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from codetally.app import (
    current_stats,
    link_repository,
    report_capture,
    run_sync,
    save_credentials,
    shared_configuration,
)
from codetally.domain.errors import CodeTallyError

if TYPE_CHECKING:
    from codetally.app import AppContext

log = getLogger(__name__)

Response = dict[str, object]


class MessageBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class TriggerFullSync(MessageBase):
    type: Literal["trigger-full-sync"]


class RequestCurrentStats(MessageBase):
    type: Literal["request-current-stats"]


class ReportSingleCapture(MessageBase):
    type: Literal["report-single-capture"]
    difficulty: str | None = None


class RequestSharedConfiguration(MessageBase):
    type: Literal["request-shared-configuration"]


class PersistCredentials(MessageBase):
    type: Literal["persist-credentials"]
    username: str = Field(min_length=1)
    token: str = Field(min_length=1)


class LinkRepository(MessageBase):
    type: Literal["link-repository"]
    repository: str = Field(min_length=1)


Message = Annotated[
    TriggerFullSync
    | RequestCurrentStats
    | ReportSingleCapture
    | RequestSharedConfiguration
    | PersistCredentials
    | LinkRepository,
    Field(discriminator="type"),
]

_MESSAGE_ADAPTER: TypeAdapter[Message] = TypeAdapter(Message)


def completed(**extra: object) -> Response:
    return {"status": "completed", **extra}


def failed(error: str) -> Response:
    return {"status": "failed", "error": error}


@dataclass(slots=True)
class MessageRouter:
    context: AppContext

    async def dispatch(self, raw: Mapping[str, object]) -> Response:
        if not isinstance(raw, Mapping):
            return failed("Invalid message: expected an object")
        try:
            message = _MESSAGE_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            log.warning("Rejected message %r: %s", raw.get("type"), exc.errors()[0]["msg"])
            return failed(f"Invalid message: {exc.errors()[0]['msg']}")

        handler = self._handlers()[type(message)]
        try:
            return await handler(message)
        except CodeTallyError as exc:
            log.error("Handling %s failed: %s", message.type, exc)
            return failed(str(exc))

    def _handlers(self) -> dict[type[MessageBase], Callable[[Any], Awaitable[Response]]]:
        return {
            TriggerFullSync: self._trigger_full_sync,
            RequestCurrentStats: self._request_current_stats,
            ReportSingleCapture: self._report_single_capture,
            RequestSharedConfiguration: self._request_shared_configuration,
            PersistCredentials: self._persist_credentials,
            LinkRepository: self._link_repository,
        }

    async def _trigger_full_sync(self, message: TriggerFullSync) -> Response:
        _ = message
        result = await run_sync(self.context)
        if not result.success:
            return failed(result.message)
        return completed(message=result.message, counts=result.counts.as_dict())

    async def _request_current_stats(self, message: RequestCurrentStats) -> Response:
        _ = message
        return current_stats(self.context).as_dict()

    async def _report_single_capture(self, message: ReportSingleCapture) -> Response:
        return {"success": report_capture(self.context, message.difficulty)}

    async def _request_shared_configuration(self, message: RequestSharedConfiguration) -> Response:
        _ = message
        return shared_configuration(self.context)

    async def _persist_credentials(self, message: PersistCredentials) -> Response:
        save_credentials(self.context, username=message.username, token=message.token)
        return {"success": True}

    async def _link_repository(self, message: LinkRepository) -> Response:
        coordinates = link_repository(self.context, message.repository)
        return completed(repository=str(coordinates))
