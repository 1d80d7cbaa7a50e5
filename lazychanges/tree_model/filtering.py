"""Merge-tool backup filtering for status records."""

from __future__ import annotations

import re
from collections.abc import Iterable

from ..models import FileStatusRecord

# Backups written by ``git mergetool``: file.orig, file.BACKUP.1234.ext, ...
MERGE_ARTIFACT_PATTERNS = (
    re.compile(r"\.orig$"),
    re.compile(r"\.BACKUP\."),
    re.compile(r"\.BASE\."),
    re.compile(r"\.LOCAL\."),
    re.compile(r"\.REMOTE\."),
)


def is_merge_artifact(path: str) -> bool:
    return any(pattern.search(path) for pattern in MERGE_ARTIFACT_PATTERNS)


def filter_merge_artifacts(
    records: Iterable[FileStatusRecord],
    enabled: bool = True,
) -> list[FileStatusRecord]:
    """Return ``records`` without merge artifacts, or unchanged when disabled.

    Always returns a new list; the input is never mutated.
    """
    if not enabled:
        return list(records)
    return [record for record in records if not is_merge_artifact(record.path)]


__all__ = ["MERGE_ARTIFACT_PATTERNS", "is_merge_artifact", "filter_merge_artifacts"]
