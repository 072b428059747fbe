from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """Human-readable location of an offset in the template source."""
    line: int       # 1-based
    column: int     # 1-based
    line_text: str  # source line without the trailing newline


def locate(text: str, offset: int) -> SourceLocation:
    """
    Converts a source offset into line/column and the text of its line.

    Offsets past the end of the text are clamped to the end.
    """
    offset = max(0, min(offset, len(text)))

    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)

    line = text.count("\n", 0, offset) + 1
    column = offset - line_start + 1
    return SourceLocation(line=line, column=column, line_text=text[line_start:line_end].rstrip("\r"))


__all__ = ["SourceLocation", "locate"]
