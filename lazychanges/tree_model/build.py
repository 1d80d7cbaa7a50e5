"""Flat and hierarchical node construction from status records.

Nodes are rebuilt from scratch on every refresh. In tree mode each level lists
directories before files, each sorted by case-sensitive name, and every node
carries the ``IndentState`` of its ancestors plus its own last-sibling flag.
Every leaf is tagged with the group it was built for.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator
from dataclasses import dataclass, field, replace

from ..icons import IconProvider, resolve_file_icon
from ..models import FileStatusRecord
from .types import DirectoryNode, FileNode, GroupNode, IndentState, TreeNode

logger = logging.getLogger(__name__)


@dataclass
class _DirectoryBuilder:
    directories: dict[str, _DirectoryBuilder] = field(default_factory=dict)
    files: dict[str, FileStatusRecord] = field(default_factory=dict)
    # A record whose path is this directory itself, e.g. a deleted file
    # replaced by a directory of the same name.
    record: FileStatusRecord | None = None


def _in_group(record: FileStatusRecord, group: str) -> FileStatusRecord:
    return record if record.group == group else replace(record, group=group)


def _path_segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def _insert(root: _DirectoryBuilder, record: FileStatusRecord) -> None:
    segments = _path_segments(record.path)
    if not segments:
        logger.warning("ignoring status record with empty path")
        return

    current = root
    for segment in segments[:-1]:
        shadowed = current.files.pop(segment, None)
        current = current.directories.setdefault(segment, _DirectoryBuilder())
        if shadowed is not None:
            logger.debug("%s is also a directory; showing it on the directory row", shadowed.path)
            current.record = shadowed

    leaf = segments[-1]
    if leaf in current.directories:
        logger.debug("%s is also a directory; showing it on the directory row", record.path)
        current.directories[leaf].record = record
        return
    current.files[leaf] = record


def _build_level(
    level: _DirectoryBuilder,
    parent_path: str,
    indent_state: IndentState,
    group: str,
    git_root: str,
    icon_provider: IconProvider | None,
    collapsed: Collection[str],
) -> tuple[TreeNode, ...]:
    dir_names = sorted(level.directories)
    file_names = sorted(level.files)
    last_index = len(dir_names) + len(file_names) - 1

    nodes: list[TreeNode] = []
    for index, name in enumerate(dir_names):
        full_path = f"{parent_path}/{name}" if parent_path else name
        node_state = indent_state + (index == last_index,)
        children = _build_level(
            level.directories[name],
            full_path,
            node_state,
            group,
            git_root,
            icon_provider,
            collapsed,
        )
        nodes.append(
            DirectoryNode(
                name=name,
                full_path=full_path,
                children=children,
                indent_state=node_state,
                group=group,
                expanded=full_path not in collapsed,
                record=level.directories[name].record,
            )
        )

    for index, name in enumerate(file_names, start=len(dir_names)):
        record = level.files[name]
        nodes.append(
            FileNode(
                record=record,
                icon=resolve_file_icon(icon_provider, record.path),
                indent_state=indent_state + (index == last_index,),
                git_root=git_root,
            )
        )
    return tuple(nodes)


def build_tree_nodes(
    records: Iterable[FileStatusRecord],
    git_root: str,
    group: str,
    *,
    icon_provider: IconProvider | None = None,
    collapsed: Collection[str] = (),
) -> list[TreeNode]:
    """Build the directory hierarchy for one group's records.

    ``collapsed`` lists directory ``full_path`` values to mark as closed.
    """
    root = _DirectoryBuilder()
    for record in records:
        _insert(root, _in_group(record, group))
    return list(_build_level(root, "", (), group, git_root, icon_provider, collapsed))


def build_flat_nodes(
    records: Iterable[FileStatusRecord],
    git_root: str,
    group: str,
    *,
    icon_provider: IconProvider | None = None,
) -> list[FileNode]:
    """One ``FileNode`` per record, input order, without indent state."""
    return [
        FileNode(
            record=_in_group(record, group),
            icon=resolve_file_icon(icon_provider, record.path),
            indent_state=None,
            git_root=git_root,
        )
        for record in records
    ]


def iter_file_nodes(nodes: Iterable[TreeNode]) -> Iterator[FileNode]:
    """Yield every file leaf depth-first, ignoring expansion state."""
    for node in nodes:
        if isinstance(node, FileNode):
            yield node
        else:
            yield from iter_file_nodes(node.children)


def iter_visible_nodes(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield rows in display order, skipping children of collapsed nodes."""
    for node in nodes:
        yield node
        if isinstance(node, FileNode):
            continue
        if node.expanded:
            yield from iter_visible_nodes(node.children)


def iter_records(nodes: Iterable[TreeNode]) -> Iterator[FileStatusRecord]:
    """Yield every record in the tree, including those shown on directory rows."""
    for node in nodes:
        if isinstance(node, FileNode):
            yield node.record
            continue
        if isinstance(node, DirectoryNode) and node.record is not None:
            yield node.record
        yield from iter_records(node.children)


def build_group_node(
    label: str,
    group: str,
    children: Iterable[TreeNode],
    count: int | None = None,
    *,
    expanded: bool = True,
) -> GroupNode:
    """Wrap one group's nodes; ``count`` defaults to the records they hold."""
    owned = tuple(children)
    if count is None:
        count = sum(1 for _ in iter_records(owned))
    return GroupNode(label=label, count=count, expanded=expanded, group=group, children=owned)


__all__ = [
    "build_tree_nodes",
    "build_flat_nodes",
    "build_group_node",
    "iter_file_nodes",
    "iter_records",
    "iter_visible_nodes",
]
