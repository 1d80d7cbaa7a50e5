"""Persistent JSON config helpers.

Holds the merge-artifact filter flag, view mode, icon glyphs, and git process
settings. All access is defensive: malformed or missing config falls back to
defaults, and wrongly typed keys are ignored one by one.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .icons import DEFAULT_FOLDER_ICONS, FolderIcons

logger = logging.getLogger(__name__)

APP_NAME = "lazychanges"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

VIEW_MODE_TREE = "tree"
VIEW_MODE_LIST = "list"
VIEW_MODES = (VIEW_MODE_TREE, VIEW_MODE_LIST)
DEFAULT_GIT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ExplorerConfig:
    hide_merge_artifacts: bool = True
    view_mode: str = VIEW_MODE_TREE
    file_icons: bool = True
    folder_icons: FolderIcons = DEFAULT_FOLDER_ICONS
    git_executable: str = "git"
    git_timeout_seconds: float | None = DEFAULT_GIT_TIMEOUT_SECONDS
    theme: str | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so an unwritable config
    directory never breaks the explorer.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.debug("could not write config %s: %s", CONFIG_PATH, exc)


def _bool_value(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _str_value(data: dict[str, object], key: str, default: str | None) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) and value else default


def _timeout_value(value: object) -> float | None:
    """Positive numbers are seconds, ``null`` disables the timeout."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_GIT_TIMEOUT_SECONDS
    return float(value)


def _folder_icons(data: dict[str, object]) -> FolderIcons:
    icons = data.get("icons")
    if not isinstance(icons, dict):
        return DEFAULT_FOLDER_ICONS
    return FolderIcons(
        open=_str_value(icons, "folder_open", DEFAULT_FOLDER_ICONS.open) or DEFAULT_FOLDER_ICONS.open,
        closed=_str_value(icons, "folder_closed", DEFAULT_FOLDER_ICONS.closed) or DEFAULT_FOLDER_ICONS.closed,
    )


def load_explorer_config() -> ExplorerConfig:
    data = load_config()
    view_mode = data.get("view_mode")
    return ExplorerConfig(
        hide_merge_artifacts=_bool_value(data, "hide_merge_artifacts", True),
        view_mode=view_mode if view_mode in VIEW_MODES else VIEW_MODE_TREE,
        file_icons=_bool_value(data, "file_icons", True),
        folder_icons=_folder_icons(data),
        git_executable=_str_value(data, "git_executable", "git") or "git",
        git_timeout_seconds=_timeout_value(data.get("git_timeout_seconds", DEFAULT_GIT_TIMEOUT_SECONDS)),
        theme=_str_value(data, "theme", None),
    )


def save_view_mode(view_mode: str) -> None:
    """Persist the tree/list preference; unknown modes are rejected."""
    if view_mode not in VIEW_MODES:
        raise ValueError(f"unknown view mode: {view_mode!r}")
    config = load_config()
    config["view_mode"] = view_mode
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "VIEW_MODE_TREE",
    "VIEW_MODE_LIST",
    "VIEW_MODES",
    "ExplorerConfig",
    "load_config",
    "save_config",
    "load_explorer_config",
    "save_view_mode",
]
