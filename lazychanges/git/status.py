"""Working-tree status collection from ``git status --porcelain=v1 -z``."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..models import GROUP_CONFLICTS, GROUP_STAGED, GROUP_UNSTAGED, FileStatusRecord
from .errors import GitError
from .runner import GitRunner

STATUS_ARGS = ["status", "--porcelain=v1", "-z", "--untracked-files=normal"]
_CONFLICT_PAIRS = {"AA", "DD"}


@dataclass(frozen=True)
class StatusSnapshot:
    conflicts: list[FileStatusRecord] = field(default_factory=list)
    staged: list[FileStatusRecord] = field(default_factory=list)
    unstaged: list[FileStatusRecord] = field(default_factory=list)

    def groups(self) -> list[tuple[str, list[FileStatusRecord]]]:
        return [
            (GROUP_CONFLICTS, self.conflicts),
            (GROUP_STAGED, self.staged),
            (GROUP_UNSTAGED, self.unstaged),
        ]


def iter_porcelain_records(output: str) -> list[tuple[str, str, str | None]]:
    """Split ``-z`` porcelain output into ``(xy, path, old_path)`` triples."""
    records: list[tuple[str, str, str | None]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        old_path = None
        # Renames and copies carry the source path as the next token.
        if "R" in status or "C" in status:
            if index < len(tokens):
                old_path = tokens[index] or None
            index += 1
        records.append((status, token[3:], old_path))
    return records


def _is_conflict(xy: str) -> bool:
    return "U" in xy or xy in _CONFLICT_PAIRS


def parse_porcelain_status(output: str) -> StatusSnapshot:
    snapshot = StatusSnapshot()
    for xy, path, old_path in iter_porcelain_records(output):
        if not path or xy == "!!":
            continue
        if xy == "??":
            snapshot.unstaged.append(FileStatusRecord(path, "??", group=GROUP_UNSTAGED))
            continue
        if _is_conflict(xy):
            snapshot.conflicts.append(FileStatusRecord(path, "!", group=GROUP_CONFLICTS))
            continue

        index_code, worktree_code = xy[0], xy[1]
        if index_code not in " ?":
            renamed_from = old_path if index_code in "RC" else None
            snapshot.staged.append(FileStatusRecord(path, index_code, renamed_from, GROUP_STAGED))
        if worktree_code != " ":
            renamed_from = old_path if worktree_code in "RC" else None
            snapshot.unstaged.append(FileStatusRecord(path, worktree_code, renamed_from, GROUP_UNSTAGED))
    return snapshot


def collect_status(
    runner: GitRunner,
    git_root: str,
    callback: Callable[[GitError | None, StatusSnapshot | None], None],
) -> None:
    """Deliver the repository's grouped status records."""

    def on_done(error: GitError | None, output: str | None) -> None:
        if error is not None:
            callback(error, None)
            return
        callback(None, parse_porcelain_status(output or ""))

    runner.execute(STATUS_ARGS, on_done, cwd=git_root)


__all__ = [
    "STATUS_ARGS",
    "StatusSnapshot",
    "iter_porcelain_records",
    "parse_porcelain_status",
    "collect_status",
]
