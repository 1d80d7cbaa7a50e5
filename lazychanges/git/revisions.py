"""Repository-root, revision, and historical-content lookups.

Each async operation is one git invocation whose raw result is mapped onto
the error taxonomy in ``errors`` before reaching the caller's callback.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from pathlib import Path

from .errors import FileNotFoundInRevision, GitError, InvalidRevision, NotARepository, PathOutsideRepository
from .runner import GitRunner

_MISSING_IN_REVISION_RE = re.compile(r"does not exist|exists on disk, but not in")

RootCallback = Callable[[GitError | None, str | None], None]
LinesCallback = Callable[[GitError | None, list[str] | None], None]


def normalize_slashes(path: str) -> str:
    return path.replace("\\", "/")


def split_content_lines(output: str) -> list[str]:
    """Split ``git show`` output into lines.

    Only the single empty element produced by a trailing newline is dropped.
    """
    lines = output.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _working_directory_for(file_path: str | Path) -> str:
    path = Path(file_path)
    if path.is_dir():
        return str(path)
    return str(path.parent)


def get_relative_path(file_path: str | Path, git_root: str) -> str:
    """Return ``file_path`` relative to ``git_root`` with ``/`` separators.

    Raises ``PathOutsideRepository`` when the path is not below the root, also
    after resolving symlinks on both sides.
    """
    root = normalize_slashes(git_root).rstrip("/")
    candidates = [
        (normalize_slashes(os.path.abspath(file_path)), root),
        (normalize_slashes(os.path.realpath(file_path)), normalize_slashes(os.path.realpath(root or "/"))),
    ]
    for abs_path, root_path in candidates:
        prefix = root_path.rstrip("/") + "/"
        if abs_path.startswith(prefix) and len(abs_path) > len(prefix):
            return abs_path[len(prefix):]
    raise PathOutsideRepository(str(file_path), git_root)


class RevisionResolver:
    """Async git lookups built on a ``GitRunner``."""

    def __init__(self, runner: GitRunner) -> None:
        self.runner = runner

    def get_git_root(self, file_path: str | Path, callback: RootCallback) -> None:
        def on_done(error: GitError | None, output: str | None) -> None:
            if error is not None:
                callback(NotARepository(str(error)), None)
                return
            callback(None, normalize_slashes((output or "").strip()))

        self.runner.execute(
            ["rev-parse", "--show-toplevel"],
            on_done,
            cwd=_working_directory_for(file_path),
        )

    get_relative_path = staticmethod(get_relative_path)

    def resolve_revision(self, revision: str, git_root: str, callback: RootCallback) -> None:
        """Deliver the commit hash ``revision`` points at."""

        def on_done(error: GitError | None, output: str | None) -> None:
            if error is not None:
                callback(InvalidRevision(revision, str(error)), None)
                return
            callback(None, (output or "").strip())

        self.runner.execute(["rev-parse", "--verify", revision], on_done, cwd=git_root)

    def get_file_content(
        self,
        revision: str,
        git_root: str,
        rel_path: str,
        callback: LinesCallback,
    ) -> None:
        """Deliver the lines of ``rel_path`` as stored at ``revision``."""

        def on_done(error: GitError | None, output: str | None) -> None:
            if error is not None:
                if _MISSING_IN_REVISION_RE.search(str(error)):
                    callback(FileNotFoundInRevision(rel_path, revision), None)
                else:
                    callback(error, None)
                return
            callback(None, split_content_lines(output or ""))

        self.runner.execute(["show", f"{revision}:{rel_path}"], on_done, cwd=git_root)


__all__ = [
    "RevisionResolver",
    "get_relative_path",
    "normalize_slashes",
    "split_content_lines",
]
