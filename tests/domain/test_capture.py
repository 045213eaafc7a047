from __future__ import annotations

import asyncio

import pytest

from codetally.adapters.leetcode.extraction import default_extractor_chain
from codetally.config.polling import PollingConfig
from codetally.domain.capture import SubmissionPoller, submission_id_from_location
from codetally.domain.errors import CaptureTimeout, SourceUnavailable
from codetally.domain.model import SubmissionStatus
from codetally.domain.ports import GradingPoll
from tests.helpers.fakes import (
    RecordingSleep,
    ScriptedGradingSource,
    ScriptedLocationContext,
    make_record,
)

PROBLEM_URL = "https://leetcode.com/problems/two-sum/"
SUBMISSION_URL = "https://leetcode.com/problems/two-sum/submissions/1234567/"

RESULT_PAGE = """
<div>
  <a href="/problems/two-sum/">1. Two Sum</a>
  <span data-e2e-locator="submission-result">Accepted</span>
  <div data-e2e-locator="submission-runtime">3 ms</div>
  <div data-e2e-locator="submission-memory">16.5 MB</div>
</div>
"""


def _poller(source: ScriptedGradingSource, sleep: RecordingSleep) -> SubmissionPoller:
    return SubmissionPoller(
        source=source,
        fallback=default_extractor_chain(),
        config=PollingConfig(),
        sleep=sleep,
    )


@pytest.mark.parametrize(
    ("location", "expected"),
    [
        (SUBMISSION_URL, "1234567"),
        ("https://leetcode.com/submissions/detail/42/", "42"),
        (PROBLEM_URL, None),
        (None, None),
        ("", None),
    ],
)
def test_submission_id_from_location(location: str | None, expected: str | None) -> None:
    assert submission_id_from_location(location) == expected


def test_capture_polls_until_finished_on_tenth_poll(sleep: RecordingSleep) -> None:
    record = make_record(submission_id="1234567")
    source = ScriptedGradingSource([GradingPoll.pending()] * 9 + [GradingPoll.done(record)])
    context = ScriptedLocationContext([PROBLEM_URL, PROBLEM_URL, SUBMISSION_URL])

    captured = asyncio.run(_poller(source, sleep).capture(context))

    assert captured is record
    assert source.calls == ["1234567"] * 10
    assert sleep.delays == [0.5, 0.5, 2.0] + [1.0] * 9


def test_capture_returns_rejected_results(sleep: RecordingSleep) -> None:
    record = make_record(SubmissionStatus.NOT_ACCEPTED)
    source = ScriptedGradingSource([GradingPoll.done(record)])
    context = ScriptedLocationContext([SUBMISSION_URL])

    captured = asyncio.run(_poller(source, sleep).capture(context))

    assert captured.status is SubmissionStatus.NOT_ACCEPTED
    assert not captured.accepted


def test_capture_location_loop_is_bounded(sleep: RecordingSleep) -> None:
    source = ScriptedGradingSource([GradingPoll.pending()])
    context = ScriptedLocationContext([PROBLEM_URL])

    with pytest.raises(CaptureTimeout):
        asyncio.run(_poller(source, sleep).capture(context))

    assert source.calls == []
    assert sleep.delays == [0.5] * 19
    assert context.reads <= PollingConfig().location_attempts + 1


def test_capture_falls_back_to_page_when_result_never_resolves(sleep: RecordingSleep) -> None:
    source = ScriptedGradingSource([GradingPoll.pending()])
    context = ScriptedLocationContext([SUBMISSION_URL], markup=RESULT_PAGE)

    captured = asyncio.run(_poller(source, sleep).capture(context))

    assert len(source.calls) == PollingConfig().result_attempts
    assert captured.status is SubmissionStatus.ACCEPTED
    assert captured.submission_id == "1234567"
    assert captured.canonical_id == "1"
    assert captured.title_slug == "two-sum"
    assert captured.runtime_ms == 3.0
    assert captured.memory_bytes == 17_301_504
    assert captured.source_code == ""


def test_capture_falls_back_immediately_when_source_unreachable(sleep: RecordingSleep) -> None:
    source = ScriptedGradingSource([SourceUnavailable("connection refused")])
    context = ScriptedLocationContext([SUBMISSION_URL], markup=RESULT_PAGE)

    captured = asyncio.run(_poller(source, sleep).capture(context))

    assert len(source.calls) == 1
    assert captured.runtime_ms == 3.0
    assert sleep.delays == [2.0]


def test_capture_treats_empty_answer_as_unavailable(sleep: RecordingSleep) -> None:
    source = ScriptedGradingSource([None])
    context = ScriptedLocationContext([SUBMISSION_URL])

    with pytest.raises(SourceUnavailable, match="1234567"):
        asyncio.run(_poller(source, sleep).capture(context))

    assert len(source.calls) == 1


def test_capture_reraises_when_page_has_nothing(sleep: RecordingSleep) -> None:
    source = ScriptedGradingSource([GradingPoll.pending()])
    context = ScriptedLocationContext([SUBMISSION_URL], markup="<html><body></body></html>")

    with pytest.raises(CaptureTimeout):
        asyncio.run(_poller(source, sleep).capture(context))
