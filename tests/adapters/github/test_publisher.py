from __future__ import annotations

import asyncio
import base64
import json

import httpx
import pytest

from codetally.adapters.github import GitHubContentsClient, SolutionPublisher
from codetally.adapters.github.publisher import solution_path
from codetally.config.github import get_github_config
from codetally.config.sync import SyncConfig
from codetally.domain.errors import RepositoryUnreachable
from codetally.domain.model import RepositoryCoordinates, SubmissionStatus
from tests.helpers.fakes import make_record
from tests.helpers.http import make_client_factory

COORDINATES = RepositoryCoordinates("octocat", "leetcode")
FILE_PATH = "/repos/octocat/leetcode/contents/python/0001%20two-sum.py"


def _publisher(
    *,
    existing_sha: str | None = None,
    put_status: int = 201,
    seen: list[httpx.Request] | None = None,
    code_submit: bool = True,
) -> SolutionPublisher:
    def route(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.method == "GET":
            if existing_sha is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200,
                json={
                    "name": "0001 two-sum.py",
                    "path": "python/0001 two-sum.py",
                    "type": "file",
                    "sha": existing_sha,
                },
            )
        return httpx.Response(
            put_status,
            json={
                "content": {
                    "name": "0001 two-sum.py",
                    "path": "python/0001 two-sum.py",
                    "type": "file",
                    "sha": "new-sha",
                },
                "commit": {"sha": "commit-sha"},
            },
        )

    contents = GitHubContentsClient(
        config=get_github_config(),
        token_provider=lambda: "ghp_token",
        client_factory=make_client_factory(route),
    )
    return SolutionPublisher(contents=contents, config=SyncConfig(code_submit=code_submit))


def test_solution_path_uses_language_folder_and_padded_id() -> None:
    assert solution_path(make_record()) == "python/0001 two-sum.py"
    assert solution_path(make_record(language_tag="cpp", canonical_id="42")) == "cpp/0042 two-sum.cpp"
    assert solution_path(make_record(canonical_id=None)) is None
    assert solution_path(make_record(title_slug=None)) is None


def test_publish_creates_new_file() -> None:
    seen: list[httpx.Request] = []

    response = asyncio.run(_publisher(seen=seen).publish(make_record(), COORDINATES))

    assert response is not None
    assert response.commit.sha == "commit-sha"
    get, put = seen
    assert get.method == "GET"
    assert put.method == "PUT"
    assert put.url.raw_path.decode() == FILE_PATH
    body = json.loads(put.content)
    assert base64.b64decode(body["content"]).decode() == "class Solution: ..."
    assert "sha" not in body
    assert "two-sum" in body["message"]


def test_publish_replaces_existing_file_with_its_sha() -> None:
    seen: list[httpx.Request] = []

    asyncio.run(_publisher(existing_sha="old-sha", seen=seen).publish(make_record(), COORDINATES))

    assert json.loads(seen[-1].content)["sha"] == "old-sha"


@pytest.mark.parametrize(
    ("record", "code_submit"),
    [
        (make_record(SubmissionStatus.NOT_ACCEPTED), True),
        (make_record(source_code=""), True),
        (make_record(canonical_id=None), True),
        (make_record(), False),
    ],
)
def test_publish_skips_records_that_do_not_qualify(record: object, code_submit: bool) -> None:
    seen: list[httpx.Request] = []
    publisher = _publisher(seen=seen, code_submit=code_submit)

    assert asyncio.run(publisher.publish(record, COORDINATES)) is None  # type: ignore[arg-type]
    assert seen == []


def test_publish_failure_raises_repository_unreachable() -> None:
    with pytest.raises(RepositoryUnreachable) as exc:
        asyncio.run(_publisher(put_status=403).publish(make_record(), COORDINATES))

    assert exc.value.path == "python/0001 two-sum.py"
