"""Git process execution, revision lookups, and status collection."""

from __future__ import annotations

from .errors import (
    FileNotFoundInRevision,
    GitCommandFailed,
    GitError,
    GitTimeout,
    InvalidRevision,
    NotARepository,
    PathOutsideRepository,
    SpawnFailure,
)
from .revisions import RevisionResolver, get_relative_path, split_content_lines
from .runner import CallbackQueue, GitRunner, PipeStreamRunner, SingleShotRunner, create_runner
from .status import StatusSnapshot, collect_status, parse_porcelain_status

__all__ = [
    "CallbackQueue",
    "GitRunner",
    "SingleShotRunner",
    "PipeStreamRunner",
    "create_runner",
    "RevisionResolver",
    "get_relative_path",
    "split_content_lines",
    "StatusSnapshot",
    "collect_status",
    "parse_porcelain_status",
    "GitError",
    "GitCommandFailed",
    "SpawnFailure",
    "GitTimeout",
    "NotARepository",
    "InvalidRevision",
    "FileNotFoundInRevision",
    "PathOutsideRepository",
]
