"""UI theme definitions and selection helpers.

Renderers emit semantic style names (``comment``, ``status_added``, ...);
a theme maps those names to ANSI SGR sequences.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    normal: str
    comment: str
    title: str
    directory: str
    selected: str
    status_modified: str
    status_added: str
    status_deleted: str
    status_untracked: str
    status_conflict: str
    status_other: str
    error: str

    def sgr_for(self, style: str) -> str:
        """Return the escape sequence for ``style``.

        Styles that already are escape sequences (icon colors) pass through;
        unknown names fall back to ``normal``.
        """
        if style.startswith("\033"):
            return style if self.reset else ""
        value = getattr(self, style, None)
        if isinstance(value, str) and style not in {"name", "reset"}:
            return value
        return self.normal


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    normal="\033[38;5;252m",
    comment="\033[38;5;244m",
    title="\033[1;38;5;81m",
    directory="\033[1;34m",
    selected="\033[7m",
    status_modified="\033[38;5;214m",
    status_added="\033[38;5;42m",
    status_deleted="\033[38;5;203m",
    status_untracked="\033[38;5;110m",
    status_conflict="\033[1;38;5;203m",
    status_other="\033[38;5;252m",
    error="\033[1;31m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    normal="\033[38;5;252m",
    comment="\033[2;38;5;110m",
    title="\033[1;38;5;45m",
    directory="\033[1;38;5;45m",
    selected="\033[7;38;5;153m",
    status_modified="\033[38;5;215m",
    status_added="\033[38;5;84m",
    status_deleted="\033[38;5;210m",
    status_untracked="\033[38;5;117m",
    status_conflict="\033[1;38;5;210m",
    status_other="\033[38;5;153m",
    error="\033[1;38;5;210m",
)

PLAIN_THEME = UITheme(**{item.name: "" for item in fields(UITheme)} | {"name": "plain"})

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme`` and the ``theme`` config key."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Case-insensitive lookup; unknown or empty names map to ``default``."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """``no_color`` wins over any name and yields the escape-free palette."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
