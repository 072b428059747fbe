"""
Lexical types of the template engine.

Tokens never copy source text: they only hold offsets into the template
string, and the text is sliced later through the holder of the source.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Token kinds produced by the lexer."""
    OPEN_BRACE = "OPEN_BRACE"      # {{
    CLOSE_BRACE = "CLOSE_BRACE"    # }}
    IDENT = "IDENT"                # .foo.bar (dot not included)
    RANGE = "RANGE"                # range
    IF = "IF"                      # if
    END = "END"                    # end


# Keyword text -> token type; recognized only right after '{{'
KEYWORDS = {
    "range": TokenType.RANGE,
    "if": TokenType.IF,
    "end": TokenType.END,
}


@dataclass(frozen=True)
class Token:
    """
    Token with its offsets in the source text.

    For OPEN_BRACE ``start`` is the offset of the first '{'.
    For CLOSE_BRACE ``end`` is the offset just past the second '}', so that
    ``text[open.start:close.end]`` is the whole directive.
    For IDENT ``text[start:end]`` is the raw path without the leading dot.
    """
    type: TokenType
    start: int
    end: int

    def slice(self, text: str) -> str:
        """Returns the source text covered by the token."""
        return text[self.start:self.end]

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.start}:{self.end})"


__all__ = ["TokenType", "KEYWORDS", "Token"]
