"""Change-explorer refresh and toggle tests over real temporary repositories.

Covers grouping, merge-artifact hiding, view-mode switching, and collapse state
surviving rebuilds.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazychanges import config as config_module
from lazychanges.config import VIEW_MODE_LIST, VIEW_MODE_TREE, ExplorerConfig, load_explorer_config
from lazychanges.explorer import ChangesExplorer
from lazychanges.git import CallbackQueue, NotARepository, RevisionResolver, SingleShotRunner
from lazychanges.icons import FolderIcons
from lazychanges.models import GROUP_STAGED, GROUP_UNSTAGED, Selection
from lazychanges.tree_model import DirectoryNode, GroupNode


def _git(root: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=root, check=True, capture_output=True)


@unittest.skipIf(shutil.which("git") is None, "git is required for explorer integration tests")
class ChangesExplorerTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()
        config_dir = tempfile.TemporaryDirectory()
        self.addCleanup(config_dir.cleanup)
        patcher = mock.patch.object(config_module, "CONFIG_PATH", Path(config_dir.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)
        _git(self.root, "init", "-q")
        _git(self.root, "config", "user.email", "tests@example.com")
        _git(self.root, "config", "user.name", "Tests")
        _git(self.root, "config", "commit.gpgsign", "false")

        (self.root / "src" / "lib").mkdir(parents=True)
        (self.root / "src" / "lib" / "core.py").write_text("x = 1\n", encoding="utf-8")
        (self.root / "src" / "main.py").write_text("y = 1\n", encoding="utf-8")
        _git(self.root, "add", "-A")
        _git(self.root, "commit", "-q", "-m", "initial")

        (self.root / "src" / "lib" / "core.py").write_text("x = 2\n", encoding="utf-8")
        (self.root / "src" / "main.py").write_text("y = 2\n", encoding="utf-8")
        (self.root / "src" / "main.py.orig").write_text("y = 0\n", encoding="utf-8")
        (self.root / "added.txt").write_text("a\n", encoding="utf-8")
        _git(self.root, "add", "added.txt")

        self.callbacks = CallbackQueue()
        self.resolver = RevisionResolver(SingleShotRunner(self.callbacks, default_timeout=30))
        self.config = ExplorerConfig(file_icons=False, folder_icons=FolderIcons(open="+", closed="-"))

    def _refresh(self, explorer: ChangesExplorer) -> object:
        results: list[object] = []
        explorer.refresh(results.append)
        self.assertTrue(self.callbacks.run_until(lambda: bool(results), timeout=60))
        return results[0]

    def _lines(self, explorer: ChangesExplorer) -> list[str]:
        return [line.text for line in explorer.render(80)]

    def test_refresh_groups_records_and_hides_merge_artifacts(self) -> None:
        explorer = ChangesExplorer(self.root, self.resolver, self.config)

        self.assertIsNone(self._refresh(explorer))

        self.assertEqual(explorer.git_root, str(self.root).replace("\\", "/"))
        self.assertEqual([section.group for section in explorer.sections], [GROUP_STAGED, GROUP_UNSTAGED])
        self.assertEqual(
            self._lines(explorer),
            [
                "▾ Staged Changes (1)",
                "└─ A added.txt",
                "▾ Changes (2)",
                "└─+ src",
                "   ├─+ lib",
                "   │  └─ M core.py",
                "   └─ M main.py",
            ],
        )
        self.assertEqual([node.path for node in explorer.file_nodes()], ["added.txt", "src/lib/core.py", "src/main.py"])

    def test_merge_artifacts_shown_when_filter_disabled(self) -> None:
        config = ExplorerConfig(hide_merge_artifacts=False, file_icons=False)
        explorer = ChangesExplorer(self.root, self.resolver, config)
        self._refresh(explorer)

        paths = [node.path for node in explorer.file_nodes()]
        self.assertIn("src/main.py.orig", paths)

    def test_toggle_view_mode_switches_to_full_paths(self) -> None:
        explorer = ChangesExplorer(self.root, self.resolver, self.config)
        self._refresh(explorer)

        self.assertEqual(explorer.toggle_view_mode(), VIEW_MODE_LIST)
        self.assertEqual(load_explorer_config().view_mode, VIEW_MODE_LIST)
        self.assertEqual(
            self._lines(explorer),
            [
                "▾ Staged Changes (1)",
                " A added.txt",
                "▾ Changes (2)",
                " M src/lib/core.py",
                " M src/main.py",
            ],
        )
        self.assertEqual(explorer.toggle_view_mode(), VIEW_MODE_TREE)
        self.assertEqual(load_explorer_config().view_mode, VIEW_MODE_TREE)
        self.assertTrue(any(isinstance(node, DirectoryNode) for node in explorer.visible_nodes()))

    def test_collapse_state_survives_refresh(self) -> None:
        explorer = ChangesExplorer(self.root, self.resolver, self.config)
        self._refresh(explorer)

        explorer.toggle_group(GROUP_STAGED)
        explorer.toggle_directory(GROUP_UNSTAGED, "src/lib")
        self._refresh(explorer)

        self.assertEqual(
            self._lines(explorer),
            [
                "▸ Staged Changes (1)",
                "▾ Changes (2)",
                "└─+ src",
                "   ├─- lib",
                "   └─ M main.py",
            ],
        )
        groups = [node for node in explorer.visible_nodes() if isinstance(node, GroupNode)]
        self.assertEqual([group.count for group in groups], [1, 2])

        explorer.toggle_directory(GROUP_UNSTAGED, "src/lib")
        self.assertIn("   │  └─ M core.py", self._lines(explorer))

    def test_selection_highlights_matching_file(self) -> None:
        explorer = ChangesExplorer(self.root, self.resolver, self.config)
        self._refresh(explorer)

        lines = explorer.render(80, Selection("src/main.py", GROUP_UNSTAGED))
        selected = [line.text for line in lines if "selected" in line.styles()]
        self.assertEqual(selected, ["   └─ M main.py"])

    def test_superseded_refresh_still_reports_completion(self) -> None:
        explorer = ChangesExplorer(self.root, self.resolver, self.config)
        results: list[object] = []
        explorer.refresh(results.append)
        explorer.refresh(results.append)

        self.assertTrue(self.callbacks.run_until(lambda: len(results) == 2, timeout=60))
        self.assertEqual(results, [None, None])
        self.assertEqual(len(explorer.file_nodes()), 3)

    def test_refresh_outside_repository_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as outside:
            explorer = ChangesExplorer(outside, self.resolver, self.config)
            error = self._refresh(explorer)

        self.assertIsInstance(error, NotARepository)
        self.assertEqual(explorer.sections, [])


if __name__ == "__main__":
    unittest.main()
