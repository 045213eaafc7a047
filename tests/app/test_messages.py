from __future__ import annotations

import asyncio

import pytest

from codetally.app import AppContext, link_repository, save_credentials
from codetally.messages import MessageRouter
from tests.helpers.app import FakeRemotes, build_test_context


@pytest.fixture
def context() -> AppContext:
    return build_test_context(FakeRemotes())


def _dispatch(context: AppContext, message: object) -> dict[str, object]:
    return asyncio.run(MessageRouter(context).dispatch(message))  # type: ignore[arg-type]


def test_trigger_full_sync_completes(context: AppContext) -> None:
    save_credentials(context, username="octocat", token="token")
    link_repository(context, "octocat/leetcode")

    response = _dispatch(context, {"type": "trigger-full-sync"})

    assert response["status"] == "completed"
    assert response["counts"] == {"easy": 1, "medium": 1, "hard": 0}


def test_trigger_full_sync_without_repository_fails(context: AppContext) -> None:
    response = _dispatch(context, {"type": "trigger-full-sync"})

    assert response["status"] == "failed"
    assert "repository" in str(response["error"]).lower()


def test_request_current_stats_returns_snapshot(context: AppContext) -> None:
    _dispatch(context, {"type": "report-single-capture", "difficulty": "Easy"})

    response = _dispatch(context, {"type": "request-current-stats"})

    assert response["easy"] == 1
    assert response["is_counting_complete"] is True
    assert response["last_outcome"] == "none"


@pytest.mark.parametrize(("difficulty", "success"), [("Medium", True), ("Bogus", False), (None, False)])
def test_report_single_capture(context: AppContext, difficulty: str | None, success: bool) -> None:
    response = _dispatch(context, {"type": "report-single-capture", "difficulty": difficulty})

    assert response == {"success": success}


def test_persist_credentials_and_link_repository(context: AppContext) -> None:
    assert _dispatch(
        context, {"type": "persist-credentials", "username": "octocat", "token": "t0k"}
    ) == {"success": True}

    response = _dispatch(context, {"type": "link-repository", "repository": "leetcode"})

    assert response == {"status": "completed", "repository": "octocat/leetcode"}
    shared = _dispatch(context, {"type": "request-shared-configuration"})
    assert shared["repository"] == "octocat/leetcode"
    assert "t0k" not in repr(shared)


def test_link_repository_failure_is_reported(context: AppContext) -> None:
    response = _dispatch(context, {"type": "link-repository", "repository": "no-owner"})

    assert response["status"] == "failed"


@pytest.mark.parametrize(
    "message",
    [
        {"type": "self-destruct"},
        {"difficulty": "Easy"},
        {"type": "persist-credentials", "username": ""},
        ["trigger-full-sync"],
    ],
)
def test_invalid_messages_produce_failed_responses(context: AppContext, message: object) -> None:
    response = _dispatch(context, message)

    assert response["status"] == "failed"
    assert str(response["error"]).startswith("Invalid message")
