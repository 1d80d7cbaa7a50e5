"""Terminal sanitization and Pygments highlighting of historical content."""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
DEFAULT_STYLE = "monokai"


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


@lru_cache(maxsize=None)
def _formatter_for_style(style: str) -> TerminalFormatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    return TerminalFormatter(style=style)


def colorize_lines(lines: list[str], path: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Highlight ``lines`` as the file type ``path`` implies, one output per input line."""
    if not lines:
        return []
    source = "\n".join(sanitize_terminal_text(line) for line in lines)
    # Blank first/last lines must survive: the default lexer options strip them.
    options = {"stripnl": False, "ensurenl": False}
    try:
        lexer = get_lexer_for_filename(path, source, **options)
    except ClassNotFound:
        lexer = TextLexer(**options)
    rendered = pygments_highlight(source, lexer, _formatter_for_style(style)).split("\n")
    if len(rendered) != len(lines):
        return [sanitize_terminal_text(line) for line in lines]
    return rendered


__all__ = ["DEFAULT_STYLE", "sanitize_terminal_text", "colorize_lines"]
