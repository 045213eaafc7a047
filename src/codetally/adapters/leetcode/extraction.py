"""Fallback extractors that read a rendered LeetCode submission page."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from bs4 import BeautifulSoup

from codetally.domain.extraction import ExtractorChain, PartialSubmission
from codetally.domain.model import SubmissionStatus
from codetally.domain.normalization import parse_memory_bytes, parse_runtime_ms, round_percentile

if TYPE_CHECKING:
    from bs4 import Tag

REJECTED_VERDICTS: Final = (
    "Wrong Answer",
    "Time Limit Exceeded",
    "Memory Limit Exceeded",
    "Output Limit Exceeded",
    "Runtime Error",
    "Compile Error",
)

_RUNTIME = re.compile(r"(\d+(?:\.\d+)?)\s*ms\b", re.IGNORECASE)
_MEMORY = re.compile(r"(\d+(?:\.\d+)?)\s*MB\b", re.IGNORECASE)
_BEATS = re.compile(r"Beats\s*(\d+(?:\.\d+)?)\s*%", re.IGNORECASE)
_PROBLEM_HREF = re.compile(r"/problems/([a-z0-9-]+)/?")
_PROBLEM_TITLE = re.compile(r"^\s*(\d+)\.\s+\S")
# "Accepted 5.1M" is the problem-panel acceptance stat, not a verdict.
_ACCEPTED = re.compile(r"\bAccepted\b(?!\s*:?\s*\d)")


def _soup(document: str) -> BeautifulSoup:
    return BeautifulSoup(document, "html.parser")


def _text(node: Tag | None) -> str | None:
    if node is None:
        return None
    text = node.get_text(" ", strip=True)
    return text or None


def parse_verdict(text: str | None) -> SubmissionStatus | None:
    if not text:
        return None
    if any(verdict in text for verdict in REJECTED_VERDICTS):
        return SubmissionStatus.NOT_ACCEPTED
    if _ACCEPTED.search(text):
        return SubmissionStatus.ACCEPTED
    return None


def _first_match(pattern: re.Pattern[str], text: str | None) -> str | None:
    if not text:
        return None
    match = pattern.search(text)
    return match.group(1) if match else None


def _problem_reference(soup: BeautifulSoup) -> tuple[str | None, str | None]:
    """Return ``(canonical_id, title_slug)`` from the first problem link on the page."""

    for anchor in soup.select('a[href*="/problems/"]'):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        slug = _first_match(_PROBLEM_HREF, href)
        if slug is None:
            continue
        title = _text(anchor)
        canonical_id = _first_match(_PROBLEM_TITLE, title)
        return (str(int(canonical_id)) if canonical_id else None), slug
    return None, None


@dataclass(frozen=True, slots=True)
class LocatorExtractor:
    """Reads the ``data-e2e-locator`` attributes of the result panel."""

    name: str = "data-locator"

    def extract(self, document: str) -> PartialSubmission | None:
        soup = _soup(document)

        def located(locator: str) -> str | None:
            return _text(soup.select_one(f'[data-e2e-locator="{locator}"]'))

        status = parse_verdict(located("submission-result"))
        runtime = located("submission-runtime")
        memory = located("submission-memory")
        if status is None and runtime is None and memory is None:
            return None
        canonical_id, slug = _problem_reference(soup)
        return PartialSubmission(
            canonical_id=canonical_id,
            title_slug=slug,
            status=status,
            runtime_ms=parse_runtime_ms(runtime),
            memory_bytes=parse_memory_bytes(memory),
            runtime_percentile=round_percentile(
                _first_match(_BEATS, located("submission-runtime-percentile"))
                or located("submission-runtime-percentile")
            ),
            memory_percentile=round_percentile(
                _first_match(_BEATS, located("submission-memory-percentile"))
                or located("submission-memory-percentile")
            ),
            source_code=_text(soup.select_one("pre code")),
            language_name=_text(soup.select_one('[data-e2e-locator="submission-language"]')),
        )


@dataclass(frozen=True, slots=True)
class ClassFragmentExtractor:
    """Matches result and metric containers by class-name fragments."""

    name: str = "class-fragment"

    def extract(self, document: str) -> PartialSubmission | None:
        soup = _soup(document)
        status = parse_verdict(_text(soup.select_one('[class*="submission-result"]')))
        metrics = " ".join(
            text
            for node in soup.select('[class*="metrics"], [class*="stats"], [class*="performance"]')
            if (text := _text(node))
        )
        if status is None and not metrics:
            return None
        beats = _BEATS.findall(metrics)
        memory = _first_match(_MEMORY, metrics)
        return PartialSubmission(
            status=status,
            runtime_ms=parse_runtime_ms(_first_match(_RUNTIME, metrics)),
            memory_bytes=parse_memory_bytes(f"{memory} MB") if memory else None,
            runtime_percentile=round_percentile(beats[0]) if beats else None,
            memory_percentile=round_percentile(beats[1]) if len(beats) > 1 else None,
        )


@dataclass(frozen=True, slots=True)
class TextPatternExtractor:
    """Last resort: scan the whole page text with regular expressions."""

    name: str = "text-pattern"

    def extract(self, document: str) -> PartialSubmission | None:
        soup = _soup(document)
        text = soup.get_text(" ", strip=True)
        runtime = _first_match(_RUNTIME, text)
        memory = _first_match(_MEMORY, text)
        beats = _BEATS.findall(text)
        slug = _first_match(_PROBLEM_HREF, document)
        partial = PartialSubmission(
            title_slug=slug,
            status=parse_verdict(text),
            runtime_ms=parse_runtime_ms(runtime),
            memory_bytes=parse_memory_bytes(f"{memory} MB") if memory else None,
            runtime_percentile=round_percentile(beats[0]) if beats else None,
            memory_percentile=round_percentile(beats[1]) if len(beats) > 1 else None,
        )
        return None if partial.is_empty else partial


def default_extractor_chain() -> ExtractorChain:
    return ExtractorChain(
        extractors=(LocatorExtractor(), ClassFragmentExtractor(), TextPatternExtractor())
    )
