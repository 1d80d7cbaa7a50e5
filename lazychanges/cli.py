"""Command-line front door for lazychanges.

Prints the change tree of the repository containing PATH, resolves revisions,
or prints a file as stored at a revision. Git calls run through the async
runner; the CLI owns the callback queue and pumps it until each result lands.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from .ansi import clip_ansi_line
from .config import VIEW_MODE_LIST, ExplorerConfig, load_explorer_config
from .explorer import ChangesExplorer
from .git import CallbackQueue, PathOutsideRepository, RevisionResolver, create_runner
from .git.runner import RUNNER_STRATEGIES, SingleShotRunner
from .highlight import DEFAULT_STYLE, colorize_lines
from .icons import SuffixIconProvider
from .models import GROUP_UNSTAGED, Selection
from .styled import render_ansi
from .ui_theme import available_theme_names, resolve_theme


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def _await(callbacks: CallbackQueue, start: Callable[[Callable[..., None]], None]) -> tuple:
    """Start one async operation and pump ``callbacks`` until it reports back."""
    results: list[tuple] = []
    start(lambda *args: results.append(args))
    callbacks.run_until(lambda: bool(results))
    return results[0]


def _git_root_or_exit(callbacks: CallbackQueue, resolver: RevisionResolver, path: Path) -> str:
    error, git_root = _await(callbacks, lambda done: resolver.get_git_root(path, done))
    if error is not None:
        raise SystemExit(str(error))
    return git_root


def print_changes(
    explorer: ChangesExplorer,
    callbacks: CallbackQueue,
    max_cols: int,
    theme_name: str | None,
    no_color: bool,
    selection: Selection | None = None,
) -> None:
    (error,) = _await(callbacks, explorer.refresh)
    if error is not None:
        raise SystemExit(str(error))
    if not explorer.sections:
        sys.stdout.write("No changes\n")
        return
    theme = resolve_theme(theme_name, no_color=no_color)
    for line in explorer.render(max_cols, selection):
        sys.stdout.write(clip_ansi_line(render_ansi(line, theme), max_cols) + "\n")


def print_file_at_revision(
    resolver: RevisionResolver,
    callbacks: CallbackQueue,
    target: Path,
    revision: str,
    style: str,
    no_color: bool,
) -> None:
    git_root = _git_root_or_exit(callbacks, resolver, target)
    try:
        rel_path = resolver.get_relative_path(target, git_root)
    except PathOutsideRepository as exc:
        raise SystemExit(str(exc)) from exc
    error, lines = _await(callbacks, lambda done: resolver.get_file_content(revision, git_root, rel_path, done))
    if error is not None:
        raise SystemExit(str(error))
    if not no_color:
        lines = colorize_lines(lines, rel_path, style)
    for line in lines:
        sys.stdout.write(line + "\n")


def print_resolved_revision(
    resolver: RevisionResolver,
    callbacks: CallbackQueue,
    path: Path,
    revision: str,
) -> None:
    git_root = _git_root_or_exit(callbacks, resolver, path)
    error, commit_hash = _await(callbacks, lambda done: resolver.resolve_revision(revision, git_root, done))
    if error is not None:
        raise SystemExit(str(error))
    sys.stdout.write(commit_hash + "\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show git changes as a tree and read files from git history."
    )
    parser.add_argument("path", nargs="?", default=None, help="Path inside the repository. Defaults to current directory.")
    parser.add_argument("--list", action="store_true", help="Show full paths in a flat list instead of a tree.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for output (default: terminal width).",
    )
    parser.add_argument("--select", metavar="REL_PATH", help="Highlight this repository-relative path.")
    parser.add_argument("--select-group", default=GROUP_UNSTAGED, help="Group of the --select path.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Seconds before a git call is killed.")
    parser.add_argument(
        "--runner",
        choices=sorted(RUNNER_STRATEGIES),
        default=SingleShotRunner.strategy,
        help="Subprocess execution strategy.",
    )
    parser.add_argument("--show", metavar="FILE", help="Print FILE as stored at --rev and exit.")
    parser.add_argument("--rev", default="HEAD", help="Revision for --show (default: HEAD).")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --show.")
    parser.add_argument("--resolve", metavar="REV", help="Print the commit hash REV resolves to and exit.")
    parser.add_argument("--verbose", action="store_true", help="Log git invocations to stderr.")
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and run the requested action.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config: ExplorerConfig = load_explorer_config()
    if args.list:
        config = replace(config, view_mode=VIEW_MODE_LIST)
    timeout = args.timeout if args.timeout is not None else config.git_timeout_seconds

    callbacks = CallbackQueue()
    runner = create_runner(
        callbacks,
        args.runner,
        git_executable=config.git_executable,
        default_timeout=timeout,
    )
    resolver = RevisionResolver(runner)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    if args.show is not None:
        target = Path(args.show)
        if not target.is_absolute():
            target = (path if path.is_dir() else path.parent) / target
        print_file_at_revision(resolver, callbacks, target, args.rev, args.style, args.no_color)
        return
    if args.resolve is not None:
        print_resolved_revision(resolver, callbacks, path, args.resolve)
        return

    explorer = ChangesExplorer(
        path,
        resolver,
        config,
        icon_provider=SuffixIconProvider() if config.file_icons else None,
    )
    selection = Selection(args.select, args.select_group) if args.select else None
    max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
    print_changes(explorer, callbacks, max_cols, args.theme or config.theme, args.no_color, selection)


if __name__ == "__main__":
    main()
