"""Changed-file records and status classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

GROUP_CONFLICTS = "conflicts"
GROUP_STAGED = "staged"
GROUP_UNSTAGED = "unstaged"


class StatusKind(Enum):
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    UNTRACKED = "??"
    CONFLICT = "!"
    OTHER = ""


_KIND_BY_CODE = {kind.value: kind for kind in StatusKind if kind is not StatusKind.OTHER}


def status_kind(code: str) -> StatusKind:
    """Classify a raw status code; unknown codes map to ``OTHER``."""
    return _KIND_BY_CODE.get(code, StatusKind.OTHER)


def status_symbol(code: str) -> str:
    """Return the glyph shown for ``code``: the known symbol or the raw code."""
    kind = status_kind(code)
    return code if kind is StatusKind.OTHER else kind.value


@dataclass(frozen=True)
class FileStatusRecord:
    """One changed path, relative to the repository root with ``/`` separators."""

    path: str
    status: str
    old_path: str | None = None
    group: str = GROUP_UNSTAGED

    @property
    def kind(self) -> StatusKind:
        return status_kind(self.status)

    @property
    def name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Selection:
    """Currently selected file row, identified by path and group."""

    path: str
    group: str

    def matches(self, record: FileStatusRecord) -> bool:
        return record.path == self.path and record.group == self.group


__all__ = [
    "GROUP_CONFLICTS",
    "GROUP_STAGED",
    "GROUP_UNSTAGED",
    "StatusKind",
    "status_kind",
    "status_symbol",
    "FileStatusRecord",
    "Selection",
]
