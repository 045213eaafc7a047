"""Unit and label normalization for grading results.

The structured source reports runtime and memory either as display strings
("3 ms", "16.5 MB") or as raw numbers; fallback extraction only ever sees the
display strings. Everything is reduced to milliseconds and bytes here.
"""

from __future__ import annotations

import re
from typing import Final

from codetally.domain.model.records import BYTES_PER_MEGABYTE, UNKNOWN_LANGUAGE

_NUMBER_WITH_UNIT = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-zA-Z%]*)\s*$")

_RUNTIME_UNITS: Final[dict[str, float]] = {
    "": 1.0,
    "ms": 1.0,
    "s": 1000.0,
    "sec": 1000.0,
    "us": 0.001,
    "µs": 0.001,
}

_MEMORY_UNITS: Final[dict[str, int]] = {
    "b": 1,
    "kb": 1024,
    "mb": BYTES_PER_MEGABYTE,
    "gb": 1024 * BYTES_PER_MEGABYTE,
}

# display name (lower-cased) -> (language tag, file extension)
LANGUAGES: Final[dict[str, tuple[str, str]]] = {
    "python": ("python", "py"),
    "python3": ("python", "py"),
    "pandas": ("python", "py"),
    "c++": ("cpp", "cpp"),
    "cpp": ("cpp", "cpp"),
    "c": ("c", "c"),
    "java": ("java", "java"),
    "javascript": ("javascript", "js"),
    "typescript": ("typescript", "ts"),
    "c#": ("csharp", "cs"),
    "csharp": ("csharp", "cs"),
    "go": ("go", "go"),
    "golang": ("go", "go"),
    "rust": ("rust", "rs"),
    "kotlin": ("kotlin", "kt"),
    "swift": ("swift", "swift"),
    "ruby": ("ruby", "rb"),
    "scala": ("scala", "scala"),
    "php": ("php", "php"),
    "dart": ("dart", "dart"),
    "elixir": ("elixir", "ex"),
    "erlang": ("erlang", "erl"),
    "racket": ("racket", "rkt"),
    "mysql": ("mysql", "sql"),
    "ms sql server": ("mssql", "sql"),
    "oracle": ("oracle", "sql"),
    "postgresql": ("postgresql", "sql"),
    "bash": ("bash", "sh"),
}


def _split(value: str) -> tuple[float, str] | None:
    match = _NUMBER_WITH_UNIT.match(value)
    if match is None:
        return None
    return float(match.group(1)), match.group(2).lower()


def parse_runtime_ms(value: object) -> float | None:
    """Return a runtime in milliseconds from a raw number or a suffixed string."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value) if value >= 0 else None
    if not isinstance(value, str):
        return None
    parsed = _split(value)
    if parsed is None:
        return None
    number, unit = parsed
    factor = _RUNTIME_UNITS.get(unit)
    if factor is None or number < 0:
        return None
    return round(number * factor, 3)


def parse_memory_bytes(value: object) -> int | None:
    """Return a memory figure in bytes; bare numbers are already bytes."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value) if value >= 0 else None
    if not isinstance(value, str):
        return None
    parsed = _split(value)
    if parsed is None:
        return None
    number, unit = parsed
    factor = _MEMORY_UNITS.get(unit or "b")
    if factor is None or number < 0:
        return None
    return int(round(number * factor))


def round_percentile(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, int | float):
        return None
    return round(float(value), 2)


def language_tag(display_name: str | None) -> str:
    """Map a language display name ("Python3", "C++") to a stable folder tag."""

    if not display_name or not display_name.strip():
        return UNKNOWN_LANGUAGE
    key = display_name.strip().lower()
    known = LANGUAGES.get(key)
    if known is not None:
        return known[0]
    slug = re.sub(r"[^a-z0-9]+", "-", key).strip("-")
    return slug or UNKNOWN_LANGUAGE


def file_extension(tag: str) -> str:
    for known_tag, extension in LANGUAGES.values():
        if known_tag == tag:
            return extension
    return "txt"
