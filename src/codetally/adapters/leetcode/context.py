"""Capture contexts that do not need a live browser page."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from codetally.config.leetcode import LEETCODE_BASE_URL


@dataclass(frozen=True, slots=True)
class StaticCaptureContext:
    """A fixed location plus an optional saved copy of the page markup."""

    location: str | None
    markup: str | None = None

    async def current_location(self) -> str | None:
        return self.location

    async def document(self) -> str | None:
        return self.markup

    @classmethod
    def from_reference(cls, reference: str, *, html_path: Path | None = None) -> StaticCaptureContext:
        """Build a context from a submission URL or bare numeric id."""

        reference = reference.strip()
        location = (
            f"{LEETCODE_BASE_URL}submissions/detail/{reference}/"
            if reference.isdigit()
            else reference
        )
        markup = html_path.read_text(encoding="utf-8") if html_path is not None else None
        return cls(location=location, markup=markup)
