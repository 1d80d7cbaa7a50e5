"""File-type and folder glyphs.

Icon providers are optional collaborators: ``resolve_file_icon`` turns any
provider failure into "no icon" so rendering never breaks on them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileIcon:
    glyph: str
    color: str = "normal"


@dataclass(frozen=True)
class FolderIcons:
    open: str = ""
    closed: str = ""

    def for_state(self, expanded: bool) -> str:
        return self.open if expanded else self.closed


DEFAULT_FOLDER_ICONS = FolderIcons()


class IconProvider(Protocol):
    def icon_for(self, path: str) -> FileIcon | None: ...


# Nerd Font glyphs with 256-color foregrounds, keyed by lower-cased suffix.
_SUFFIX_ICONS: dict[str, FileIcon] = {
    ".py": FileIcon("", "\033[38;5;110m"),
    ".pyi": FileIcon("", "\033[38;5;110m"),
    ".js": FileIcon("", "\033[38;5;185m"),
    ".ts": FileIcon("", "\033[38;5;74m"),
    ".tsx": FileIcon("", "\033[38;5;74m"),
    ".lua": FileIcon("", "\033[38;5;74m"),
    ".rs": FileIcon("", "\033[38;5;216m"),
    ".go": FileIcon("", "\033[38;5;74m"),
    ".c": FileIcon("", "\033[38;5;111m"),
    ".h": FileIcon("", "\033[38;5;140m"),
    ".md": FileIcon("", "\033[38;5;252m"),
    ".json": FileIcon("", "\033[38;5;185m"),
    ".toml": FileIcon("", "\033[38;5;250m"),
    ".yaml": FileIcon("", "\033[38;5;250m"),
    ".yml": FileIcon("", "\033[38;5;250m"),
    ".sh": FileIcon("", "\033[38;5;113m"),
    ".html": FileIcon("", "\033[38;5;202m"),
    ".css": FileIcon("", "\033[38;5;75m"),
}
_DEFAULT_FILE_ICON = FileIcon("", "\033[38;5;250m")


class SuffixIconProvider:
    """Maps file suffixes to glyphs, with a generic file glyph for the rest."""

    def __init__(self, icons: dict[str, FileIcon] | None = None, default: FileIcon | None = _DEFAULT_FILE_ICON) -> None:
        self._icons = dict(_SUFFIX_ICONS if icons is None else icons)
        self._default = default

    def icon_for(self, path: str) -> FileIcon | None:
        return self._icons.get(PurePosixPath(path).suffix.lower(), self._default)


def resolve_file_icon(provider: IconProvider | None, path: str) -> FileIcon | None:
    if provider is None:
        return None
    try:
        icon = provider.icon_for(path)
    except Exception:
        logger.debug("icon lookup failed for %s", path, exc_info=True)
        return None
    if icon is None or not icon.glyph:
        return None
    return icon


__all__ = [
    "FileIcon",
    "FolderIcons",
    "DEFAULT_FOLDER_ICONS",
    "IconProvider",
    "SuffixIconProvider",
    "resolve_file_icon",
]
