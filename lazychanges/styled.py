"""Styled display lines produced by the node formatter."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ansi import display_width
from .ui_theme import UITheme


@dataclass(frozen=True)
class StyledSegment:
    text: str
    style: str = "normal"


@dataclass
class StyledLine:
    """Ordered run of text segments, each tagged with a style name."""

    segments: list[StyledSegment] = field(default_factory=list)

    def append(self, text: str, style: str = "normal") -> StyledLine:
        if text:
            self.segments.append(StyledSegment(text, style))
        return self

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)

    @property
    def width(self) -> int:
        return display_width(self.text)

    def styles(self) -> list[str]:
        return [segment.style for segment in self.segments]


def render_ansi(line: StyledLine, theme: UITheme) -> str:
    """Serialize ``line`` to terminal text using ``theme``."""
    out: list[str] = []
    for segment in line.segments:
        sgr = theme.sgr_for(segment.style)
        if sgr:
            out.append(f"{sgr}{segment.text}{theme.reset}")
        else:
            out.append(segment.text)
    return "".join(out)


__all__ = ["StyledSegment", "StyledLine", "render_ansi"]
