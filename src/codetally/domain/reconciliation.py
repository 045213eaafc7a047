"""Join repository files against the difficulty catalog.

Counting is per file, not per distinct problem: solving the same problem in
two language folders counts twice. Files whose identifier is missing from the
catalog are ignored rather than treated as errors.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import TYPE_CHECKING

from codetally.domain.model import RepositoryFile, Tier, TierCounts

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from codetally.domain.model import DifficultyEntry

SOLUTION_FILENAME = re.compile(r"^(\d{4})\s+.+\..+$")


def derive_canonical_id(filename: str) -> str | None:
    """Return the problem id encoded in ``filename`` ("0001 two-sum.py" -> "1")."""

    match = SOLUTION_FILENAME.match(filename)
    if match is None:
        return None
    return str(int(match.group(1)))


def parse_repository_file(filename: str, language_folder: str) -> RepositoryFile | None:
    canonical_id = derive_canonical_id(filename)
    if canonical_id is None:
        return None
    return RepositoryFile(
        original_name=filename,
        canonical_id=canonical_id,
        language_folder=language_folder,
    )


def build_catalog_lookup(entries: Iterable[DifficultyEntry]) -> dict[str, Tier]:
    return {entry.canonical_id: entry.tier for entry in entries}


def reconcile(files: Iterable[RepositoryFile], catalog: Mapping[str, Tier]) -> TierCounts:
    """Count ``files`` per difficulty tier. Pure; no I/O."""

    tally: Counter[Tier] = Counter()
    for repository_file in files:
        tier = catalog.get(repository_file.canonical_id)
        if tier is None:
            continue
        tally[tier] += 1
    return TierCounts(
        easy=tally[Tier.EASY],
        medium=tally[Tier.MEDIUM],
        hard=tally[Tier.HARD],
    )
