"""Tree node datatypes produced by the builders and consumed by the formatter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..icons import FileIcon
from ..models import FileStatusRecord

# One flag per ancestor level: True when that ancestor is the last sibling.
IndentState = tuple[bool, ...]


@dataclass(frozen=True)
class GroupNode:
    """Header row for one record group (staged, unstaged, ...)."""

    label: str
    count: int
    expanded: bool = True
    group: str = ""
    children: tuple[TreeNode, ...] = ()


@dataclass(frozen=True)
class DirectoryNode:
    """Directory row; ``record`` is set when the directory path itself changed."""

    name: str
    full_path: str
    children: tuple[TreeNode, ...]
    indent_state: IndentState
    group: str = ""
    expanded: bool = True
    record: FileStatusRecord | None = None


@dataclass(frozen=True)
class FileNode:
    """Leaf row; ``indent_state`` is ``None`` in flat (list) mode."""

    record: FileStatusRecord
    icon: FileIcon | None = None
    indent_state: IndentState | None = None
    git_root: str = ""

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def path(self) -> str:
        return self.record.path

    @property
    def group(self) -> str:
        return self.record.group

    @property
    def is_flat(self) -> bool:
        return self.indent_state is None


TreeNode = Union[GroupNode, DirectoryNode, FileNode]

__all__ = ["IndentState", "GroupNode", "DirectoryNode", "FileNode", "TreeNode"]
