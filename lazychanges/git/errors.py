"""Error types delivered to git operation callbacks.

Asynchronous operations never raise these across the callback boundary; they
are handed to the callback as its ``error`` argument instead. ``str(error)``
is the user-facing message.
"""

from __future__ import annotations


class GitError(Exception):
    """Base class for every git-layer failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class GitCommandFailed(GitError):
    """Git exited non-zero; ``message`` is its raw stderr text."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class SpawnFailure(GitError):
    """The git process could not be started."""


class GitTimeout(GitError):
    """The git process outlived its timeout and was killed."""

    def __init__(self, args: list[str], timeout: float) -> None:
        super().__init__(f"git {' '.join(args)} timed out after {timeout:g}s")
        self.timeout = timeout


class NotARepository(GitError):
    def __init__(self, detail: str = "") -> None:
        super().__init__("Not in a git repository")
        self.detail = detail


class InvalidRevision(GitError):
    def __init__(self, revision: str, message: str) -> None:
        super().__init__(f"Invalid revision '{revision}': {message.strip()}")
        self.revision = revision
        self.detail = message


class FileNotFoundInRevision(GitError):
    def __init__(self, path: str, revision: str) -> None:
        super().__init__(f"File '{path}' not found in revision '{revision}'")
        self.path = path
        self.revision = revision


class PathOutsideRepository(ValueError):
    """Raised synchronously when a path does not live under a repository root."""

    def __init__(self, path: str, git_root: str) -> None:
        super().__init__(f"'{path}' is not inside repository '{git_root}'")
        self.path = path
        self.git_root = git_root


__all__ = [
    "GitError",
    "GitCommandFailed",
    "SpawnFailure",
    "GitTimeout",
    "NotARepository",
    "InvalidRevision",
    "FileNotFoundInRevision",
    "PathOutsideRepository",
]
