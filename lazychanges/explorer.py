"""Change explorer: one refresh cycle from repository root to display lines.

A refresh resolves the repository root, collects status, filters merge
artifacts, and rebuilds every group's nodes from scratch. Expansion choices are
kept as keys (group tag, directory path) so they survive rebuilds.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .config import VIEW_MODE_LIST, VIEW_MODE_TREE, ExplorerConfig, save_view_mode
from .git.errors import GitError
from .git.revisions import RevisionResolver
from .git.status import StatusSnapshot, collect_status
from .icons import IconProvider
from .models import GROUP_CONFLICTS, GROUP_STAGED, GROUP_UNSTAGED, Selection
from .styled import StyledLine
from .tree_model import (
    FileNode,
    GroupNode,
    TreeNode,
    build_flat_nodes,
    build_group_node,
    build_tree_nodes,
    filter_merge_artifacts,
    format_node,
    iter_file_nodes,
    iter_visible_nodes,
)

logger = logging.getLogger(__name__)

GROUP_LABELS = {
    GROUP_CONFLICTS: "Merge Changes",
    GROUP_STAGED: "Staged Changes",
    GROUP_UNSTAGED: "Changes",
}

RefreshCallback = Callable[[GitError | None], None]


class ChangesExplorer:
    def __init__(
        self,
        path: str | Path,
        resolver: RevisionResolver,
        config: ExplorerConfig | None = None,
        icon_provider: IconProvider | None = None,
    ) -> None:
        self.path = Path(path)
        self.resolver = resolver
        self.config = config or ExplorerConfig()
        self.icon_provider = icon_provider
        self.view_mode = self.config.view_mode
        self.git_root: str | None = None
        self.sections: list[GroupNode] = []
        self._snapshot: StatusSnapshot | None = None
        self._generation = 0
        self._collapsed_groups: set[str] = set()
        self._collapsed_dirs: set[tuple[str, str]] = set()

    def refresh(self, on_done: RefreshCallback) -> None:
        """Start a refresh; ``on_done(error)`` fires once on the callback queue.

        A refresh superseded by a newer one still reports completion but its
        status is discarded.
        """
        self._generation += 1
        generation = self._generation

        def on_status(error: GitError | None, snapshot: StatusSnapshot | None) -> None:
            if error is not None:
                on_done(error)
                return
            if generation != self._generation:
                logger.debug("discarding stale status for refresh %d", generation)
            else:
                self._snapshot = snapshot
                self._rebuild()
            on_done(None)

        def on_root(error: GitError | None, git_root: str | None) -> None:
            if error is not None:
                on_done(error)
                return
            if generation == self._generation:
                self.git_root = git_root
            collect_status(self.resolver.runner, git_root or "", on_status)

        self.resolver.get_git_root(self.path, on_root)

    def _rebuild(self) -> None:
        if self._snapshot is None or self.git_root is None:
            self.sections = []
            return

        sections: list[GroupNode] = []
        for group, records in self._snapshot.groups():
            visible = filter_merge_artifacts(records, self.config.hide_merge_artifacts)
            if not visible:
                continue
            children: list[TreeNode]
            if self.view_mode == VIEW_MODE_LIST:
                children = list(build_flat_nodes(visible, self.git_root, group, icon_provider=self.icon_provider))
            else:
                collapsed = {path for owner, path in self._collapsed_dirs if owner == group}
                children = build_tree_nodes(
                    visible,
                    self.git_root,
                    group,
                    icon_provider=self.icon_provider,
                    collapsed=collapsed,
                )
            sections.append(
                build_group_node(
                    GROUP_LABELS.get(group, group),
                    group,
                    children,
                    expanded=group not in self._collapsed_groups,
                )
            )
        self.sections = sections

    def toggle_view_mode(self) -> str:
        """Switch between tree and list; the choice is saved to the config file."""
        self.view_mode = VIEW_MODE_TREE if self.view_mode == VIEW_MODE_LIST else VIEW_MODE_LIST
        save_view_mode(self.view_mode)
        self._rebuild()
        return self.view_mode

    def toggle_group(self, group: str) -> None:
        self._collapsed_groups ^= {group}
        self._rebuild()

    def toggle_directory(self, group: str, full_path: str) -> None:
        self._collapsed_dirs ^= {(group, full_path)}
        self._rebuild()

    def visible_nodes(self) -> list[TreeNode]:
        return list(iter_visible_nodes(self.sections))

    def file_nodes(self) -> list[FileNode]:
        return list(iter_file_nodes(self.sections))

    def render(self, max_width: int, selection: Selection | None = None) -> list[StyledLine]:
        return [
            format_node(node, max_width, selection, folder_icons=self.config.folder_icons)
            for node in self.visible_nodes()
        ]


__all__ = ["GROUP_LABELS", "ChangesExplorer"]
