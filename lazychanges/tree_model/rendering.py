"""Formatting of tree nodes into styled display lines."""

from __future__ import annotations

from ..ansi import char_display_width, display_width
from ..icons import DEFAULT_FOLDER_ICONS, FolderIcons
from ..models import Selection, StatusKind, status_symbol
from ..styled import StyledLine
from .types import DirectoryNode, FileNode, GroupNode, IndentState

INDENT_EDGE = "│"
INDENT_ITEM = "├"
INDENT_LAST = "└"
INDENT_NONE = " "
INDENT_PAD = "  "
BRANCH_DASH = "─"
GROUP_EXPANDED_MARKER = "▾ "
GROUP_COLLAPSED_MARKER = "▸ "
RENAME_ARROW = " → "
ELLIPSIS = "..."
TRUNCATION_MARGIN = 2
MIN_TRUNCATION_BUDGET = 10

STATUS_STYLES: dict[StatusKind, str] = {
    StatusKind.MODIFIED: "status_modified",
    StatusKind.ADDED: "status_added",
    StatusKind.DELETED: "status_deleted",
    StatusKind.UNTRACKED: "status_untracked",
    StatusKind.CONFLICT: "status_conflict",
    StatusKind.OTHER: "status_other",
}


def indent_guides(indent_state: IndentState) -> str:
    """Connector prefix: one guide per ancestor, then this node's branch."""
    if not indent_state:
        return ""
    guides = [(INDENT_NONE if last else INDENT_EDGE) + INDENT_PAD for last in indent_state[:-1]]
    guides.append((INDENT_LAST if indent_state[-1] else INDENT_ITEM) + BRANCH_DASH)
    return "".join(guides)


def truncate_display_text(text: str, budget: int) -> str:
    """Fit ``text`` into ``budget`` terminal columns, ending in ``...`` when cut.

    Budgets of ``MIN_TRUNCATION_BUDGET`` columns or fewer leave text untouched.
    """
    if budget <= MIN_TRUNCATION_BUDGET or display_width(text) <= budget:
        return text
    limit = budget - len(ELLIPSIS)
    kept: list[str] = []
    col = 0
    for ch in text:
        width = char_display_width(ch, col)
        if col + width > limit:
            break
        kept.append(ch)
        col += width
    return "".join(kept) + ELLIPSIS


def _format_group(node: GroupNode) -> StyledLine:
    line = StyledLine()
    line.append(GROUP_EXPANDED_MARKER if node.expanded else GROUP_COLLAPSED_MARKER, "comment")
    line.append(node.label, "title")
    line.append(f" ({node.count})", "comment")
    return line


def _format_directory(node: DirectoryNode, folder_icons: FolderIcons, selection: Selection | None) -> StyledLine:
    line = StyledLine()
    line.append(indent_guides(node.indent_state), "comment")
    line.append(folder_icons.for_state(node.expanded) + " ", "directory")
    line.append(node.name, "directory")
    record = node.record
    if record is not None:
        selected = selection is not None and selection.matches(record)
        line.append(f" {status_symbol(record.status)}", "selected" if selected else STATUS_STYLES[record.kind])
    return line


def _format_file(node: FileNode, max_width: int, selection: Selection | None) -> StyledLine:
    record = node.record
    selected = selection is not None and selection.matches(record)

    line = StyledLine()
    if node.indent_state is not None:
        line.append(indent_guides(node.indent_state), "comment")

    line.append(f" {status_symbol(record.status)} ", "selected" if selected else STATUS_STYLES[record.kind])

    if node.icon is not None:
        line.append(node.icon.glyph + " ", "selected" if selected else node.icon.color)

    display_text = record.path if node.is_flat else node.name
    if record.old_path:
        display_text = record.old_path + RENAME_ARROW + display_text

    budget = max_width - line.width - TRUNCATION_MARGIN
    line.append(truncate_display_text(display_text, budget), "selected" if selected else "normal")
    return line


def format_node(
    node: object,
    max_width: int,
    selection: Selection | None = None,
    *,
    folder_icons: FolderIcons = DEFAULT_FOLDER_ICONS,
) -> StyledLine:
    """Render one node as a styled line no wider than ``max_width`` where possible."""
    if isinstance(node, GroupNode):
        return _format_group(node)
    if isinstance(node, DirectoryNode):
        return _format_directory(node, folder_icons, selection)
    if isinstance(node, FileNode):
        return _format_file(node, max_width, selection)
    fallback = getattr(node, "text", None) or getattr(node, "label", None) or ""
    return StyledLine().append(str(fallback), "normal")


__all__ = [
    "STATUS_STYLES",
    "indent_guides",
    "truncate_display_text",
    "format_node",
]
