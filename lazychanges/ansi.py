"""Column measurement and clipping for rendered explorer rows.

Rows reach the terminal as ANSI-styled strings; widths count only visible
cells, with wide characters taking two columns.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
SGR_RESET = "\033[0m"
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks take no columns,
    and East Asian wide/fullwidth characters take two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def _cells(text: str, start_col: int = 0) -> Iterator[tuple[str, int]]:
    """Yield ``(token, width)``; escape sequences come through with width 0."""
    col = start_col
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        for ch in text[pos:match.start()]:
            width = char_display_width(ch, col)
            col += width
            yield ch, width
        yield match.group(0), 0
        pos = match.end()
    for ch in text[pos:]:
        width = char_display_width(ch, col)
        col += width
        yield ch, width


def display_width(text: str, start_col: int = 0) -> int:
    """Columns ``text`` occupies when printed from ``start_col``."""
    return sum(width for _token, width in _cells(text, start_col))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut a styled row down to ``max_cols`` columns.

    Escapes before the cut are kept. If the cut drops a trailing reset, one is
    appended so the style does not bleed into the next row.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    styled = False
    clipped = False
    for token, width in _cells(text):
        if width == 0 and token.startswith("\x1b"):
            out.append(token)
            styled = token != SGR_RESET
            continue
        if col + width > max_cols:
            clipped = True
            break
        out.append(" " * width if token == "\t" else token)
        col += width

    if clipped and styled:
        out.append(SGR_RESET)
    return "".join(out)


__all__ = ["ANSI_ESCAPE_RE", "SGR_RESET", "char_display_width", "display_width", "clip_ansi_line"]
