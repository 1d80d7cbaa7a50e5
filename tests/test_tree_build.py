"""Tree and flat node construction tests."""

from __future__ import annotations

import random
import unittest

from lazychanges.icons import FileIcon
from lazychanges.models import FileStatusRecord
from lazychanges.tree_model import (
    DirectoryNode,
    FileNode,
    build_flat_nodes,
    build_group_node,
    build_tree_nodes,
    iter_file_nodes,
    iter_records,
    iter_visible_nodes,
)

PATHS = [
    "src/util.ts",
    "src/components/Button.tsx",
    "src/components/Alert.tsx",
    "README.md",
    "src/Zeta.ts",
    "docs/guide/intro.md",
    "src/alpha.ts",
    "Makefile",
]


def _records(paths: list[str], status: str = "M", group: str = "unstaged") -> list[FileStatusRecord]:
    return [FileStatusRecord(path, status, group=group) for path in paths]


def _shape(nodes) -> list[tuple]:
    out: list[tuple] = []
    for node in nodes:
        if isinstance(node, DirectoryNode):
            out.append(("dir", node.name, node.full_path, node.indent_state, tuple(_shape(node.children))))
        else:
            out.append(("file", node.name, node.path, node.indent_state))
    return out


def _leaf_paths(nodes, prefix: str = "") -> list[str]:
    paths: list[str] = []
    for node in nodes:
        if isinstance(node, DirectoryNode):
            paths.extend(_leaf_paths(node.children, f"{prefix}{node.name}/"))
        else:
            paths.append(prefix + node.name)
    return paths


def _walk_levels(nodes):
    yield list(nodes)
    for node in nodes:
        if isinstance(node, DirectoryNode):
            yield from _walk_levels(node.children)


class BuildTreeNodesTests(unittest.TestCase):
    def test_directories_precede_files_sorted_case_sensitively(self) -> None:
        nodes = build_tree_nodes(_records(PATHS), "/repo", "unstaged")

        self.assertEqual([node.name for node in nodes], ["docs", "src", "Makefile", "README.md"])
        src = nodes[1]
        self.assertIsInstance(src, DirectoryNode)
        self.assertEqual([child.name for child in src.children], ["components", "Zeta.ts", "alpha.ts", "util.ts"])

    def test_shared_prefixes_merge_into_one_directory(self) -> None:
        nodes = build_tree_nodes(_records(["a/b/one.py", "a/b/two.py", "a/three.py"]), "/repo", "g")
        self.assertEqual(len(nodes), 1)
        a = nodes[0]
        self.assertEqual([child.name for child in a.children], ["b", "three.py"])
        self.assertEqual([child.name for child in a.children[0].children], ["one.py", "two.py"])

    def test_full_path_joins_ancestor_names(self) -> None:
        nodes = build_tree_nodes(_records(["docs/guide/intro.md"]), "/repo", "g")
        docs = nodes[0]
        guide = docs.children[0]
        self.assertEqual(docs.full_path, "docs")
        self.assertEqual(guide.full_path, "docs/guide")

    def test_indent_state_tracks_last_sibling_per_level(self) -> None:
        nodes = build_tree_nodes(_records(["a/x.py", "a/y.py", "b.py"]), "/repo", "g")
        a, b = nodes
        self.assertEqual(a.indent_state, (False,))
        self.assertEqual(b.indent_state, (True,))
        self.assertEqual([child.indent_state for child in a.children], [(False, False), (False, True)])

    def test_leaf_paths_reconstruct_record_paths(self) -> None:
        nodes = build_tree_nodes(_records(PATHS), "/repo", "g")
        self.assertEqual(sorted(_leaf_paths(nodes)), sorted(PATHS))

    def test_every_level_is_unique_and_directories_first(self) -> None:
        nodes = build_tree_nodes(_records(PATHS), "/repo", "g")
        for level in _walk_levels(nodes):
            names = [node.name for node in level]
            self.assertEqual(len(names), len(set(names)))
            kinds = [isinstance(node, DirectoryNode) for node in level]
            self.assertEqual(kinds, sorted(kinds, reverse=True))

    def test_ordering_is_independent_of_input_order(self) -> None:
        expected = _shape(build_tree_nodes(_records(PATHS), "/repo", "g"))
        shuffled = list(PATHS)
        rng = random.Random(7)
        for _ in range(5):
            rng.shuffle(shuffled)
            self.assertEqual(_shape(build_tree_nodes(_records(shuffled), "/repo", "g")), expected)

    def test_building_twice_yields_identical_structure(self) -> None:
        records = _records(PATHS)
        self.assertEqual(build_tree_nodes(records, "/repo", "g"), build_tree_nodes(records, "/repo", "g"))

    def test_file_nodes_carry_record_root_and_icon(self) -> None:
        class _Icons:
            def icon_for(self, path: str) -> FileIcon | None:
                return FileIcon("T", "title") if path.endswith(".ts") else None

        nodes = build_tree_nodes(_records(["x.ts", "y.md"]), "/repo", "g", icon_provider=_Icons())
        x, y = nodes
        self.assertEqual(x.icon, FileIcon("T", "title"))
        self.assertIsNone(y.icon)
        self.assertEqual(x.git_root, "/repo")
        self.assertEqual(x.record.path, "x.ts")

    def test_failing_icon_provider_degrades_to_no_icon(self) -> None:
        class _Broken:
            def icon_for(self, path: str) -> FileIcon | None:
                raise RuntimeError("no icons today")

        nodes = build_tree_nodes(_records(["x.ts"]), "/repo", "g", icon_provider=_Broken())
        self.assertIsNone(nodes[0].icon)

    def test_collapsed_directories_are_marked_closed(self) -> None:
        nodes = build_tree_nodes(_records(["a/b/c.py"]), "/repo", "g", collapsed={"a/b"})
        self.assertTrue(nodes[0].expanded)
        self.assertFalse(nodes[0].children[0].expanded)
        self.assertEqual(nodes[0].group, "g")

    def test_file_replaced_by_directory_is_kept_on_directory_row(self) -> None:
        for records in (
            [FileStatusRecord("a", "D"), FileStatusRecord("a/b.py", "A")],
            [FileStatusRecord("a/b.py", "A"), FileStatusRecord("a", "D")],
        ):
            with self.subTest(order=[record.path for record in records]):
                nodes = build_tree_nodes(records, "/repo", "staged")
                self.assertEqual(_leaf_paths(nodes), ["a/b.py"])
                self.assertEqual(nodes[0].record, FileStatusRecord("a", "D", group="staged"))
                self.assertEqual(
                    sorted(record.path for record in iter_records(nodes)),
                    ["a", "a/b.py"],
                )

    def test_file_nodes_take_the_group_they_are_built_for(self) -> None:
        records = [FileStatusRecord("src/a.ts", "M"), FileStatusRecord("b.ts", "A")]

        tree = build_tree_nodes(records, "/repo", "staged")
        self.assertEqual([node.group for node in iter_file_nodes(tree)], ["staged", "staged"])
        self.assertEqual(tree[0].children[0].record.group, "staged")

        flat = build_flat_nodes(records, "/repo", "staged")
        self.assertEqual([node.group for node in flat], ["staged", "staged"])
        self.assertEqual(records[0].group, "unstaged")

    def test_empty_input_builds_no_nodes(self) -> None:
        self.assertEqual(build_tree_nodes([], "/repo", "g"), [])


class BuildFlatNodesTests(unittest.TestCase):
    def test_flat_nodes_keep_input_order_without_indent_state(self) -> None:
        nodes = build_flat_nodes(_records(["z/y.py", "a.py"]), "/repo", "staged")
        self.assertEqual([node.path for node in nodes], ["z/y.py", "a.py"])
        self.assertTrue(all(node.indent_state is None and node.is_flat for node in nodes))
        self.assertTrue(all(isinstance(node, FileNode) for node in nodes))


class GroupAndVisibilityTests(unittest.TestCase):
    def test_group_node_counts_file_leaves(self) -> None:
        children = build_tree_nodes(_records(PATHS), "/repo", "unstaged")
        group = build_group_node("Changes", "unstaged", children)
        self.assertEqual(group.count, len(PATHS))
        self.assertEqual(group.label, "Changes")
        self.assertEqual(len(list(iter_file_nodes([group]))), len(PATHS))

    def test_group_count_includes_directory_row_records(self) -> None:
        records = [FileStatusRecord("a", "D"), FileStatusRecord("a/b.py", "A")]
        group = build_group_node("Staged Changes", "staged", build_tree_nodes(records, "/repo", "staged"))
        self.assertEqual(group.count, 2)
        self.assertEqual(build_group_node("Changes", "g", (), 5).count, 5)

    def test_visible_nodes_skip_collapsed_children(self) -> None:
        children = build_tree_nodes(_records(["a/b.py", "c.py"]), "/repo", "g", collapsed={"a"})
        group = build_group_node("Changes", "g", children)
        self.assertEqual(
            [getattr(node, "name", None) or node.label for node in iter_visible_nodes([group])],
            ["Changes", "a", "c.py"],
        )

        closed = build_group_node("Changes", "g", children, expanded=False)
        self.assertEqual(list(iter_visible_nodes([closed])), [closed])


if __name__ == "__main__":
    unittest.main()
