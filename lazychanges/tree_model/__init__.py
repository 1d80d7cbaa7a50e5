"""Change-tree construction, merge-artifact filtering, and row formatting.

Defines the ``TreeNode`` variants and the pure builders/formatters that turn
status records into display lines.
"""

from __future__ import annotations

from .build import (
    build_flat_nodes,
    build_group_node,
    build_tree_nodes,
    iter_file_nodes,
    iter_records,
    iter_visible_nodes,
)
from .filtering import filter_merge_artifacts, is_merge_artifact
from .rendering import format_node, indent_guides, truncate_display_text
from .types import DirectoryNode, FileNode, GroupNode, IndentState, TreeNode

__all__ = [
    "IndentState",
    "GroupNode",
    "DirectoryNode",
    "FileNode",
    "TreeNode",
    "build_tree_nodes",
    "build_flat_nodes",
    "build_group_node",
    "iter_file_nodes",
    "iter_records",
    "iter_visible_nodes",
    "filter_merge_artifacts",
    "is_merge_artifact",
    "format_node",
    "indent_guides",
    "truncate_display_text",
]
