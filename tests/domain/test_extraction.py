from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from codetally.domain.extraction import ExtractorChain, PartialSubmission
from codetally.domain.model import SubmissionStatus


@dataclass(frozen=True)
class FixedExtractor:
    name: str
    result: PartialSubmission | None

    def extract(self, document: str) -> PartialSubmission | None:
        _ = document
        return self.result


@dataclass(frozen=True)
class BrokenExtractor:
    name: str = "broken"

    def extract(self, document: str) -> PartialSubmission | None:
        raise ValueError(f"cannot parse {len(document)} characters")


def test_chain_keeps_first_value_per_field() -> None:
    chain = ExtractorChain(
        extractors=(
            FixedExtractor("primary", PartialSubmission(runtime_ms=3.0)),
            FixedExtractor("secondary", PartialSubmission(runtime_ms=99.0, memory_bytes=1024)),
            FixedExtractor("tertiary", PartialSubmission(status=SubmissionStatus.ACCEPTED)),
        )
    )

    merged = chain.extract("<html></html>")

    assert merged.runtime_ms == 3.0
    assert merged.memory_bytes == 1024
    assert merged.status is SubmissionStatus.ACCEPTED


def test_chain_skips_failing_extractors(caplog: pytest.LogCaptureFixture) -> None:
    chain = ExtractorChain(
        extractors=(BrokenExtractor(), FixedExtractor("ok", PartialSubmission(runtime_ms=1.0)))
    )

    with caplog.at_level(logging.ERROR):
        merged = chain.extract("<html></html>")

    assert merged.runtime_ms == 1.0
    assert "broken" in caplog.text


def test_chain_without_document_recovers_nothing() -> None:
    chain = ExtractorChain(extractors=(FixedExtractor("x", PartialSubmission(runtime_ms=1.0)),))

    assert chain.extract(None).is_empty
    assert chain.extract("").is_empty


def test_partial_submission_to_record_fills_defaults() -> None:
    record = PartialSubmission(runtime_ms=2.0, language_name="Python3").to_record(
        submission_id="7"
    )

    assert record.status is SubmissionStatus.UNKNOWN
    assert record.language_tag == "python"
    assert record.source_code == ""
    assert record.submission_id == "7"
    assert record.canonical_id is None
