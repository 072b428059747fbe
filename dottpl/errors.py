"""
Template engine errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) inherit from TemplateError.

Programming errors and bugs should NOT inherit from TemplateError;
they propagate with full tracebacks. Failures raised by an output sink
are never wrapped and reach the caller unchanged.
"""

from __future__ import annotations

import enum
from typing import Optional


class TemplateError(Exception):
    """
    Base class for all user-facing errors of the template engine.

    These errors indicate problems that the template author can fix:
    malformed directives, fields missing from the context, bad options.
    """
    pass


class CompileError(TemplateError):
    """Template text could not be turned into a declaration tree."""
    pass


class ParseErrorKind(enum.Enum):
    """Structural errors detected while matching directives."""
    EXPECTED_OPEN_BRACE = "expected '{{'"
    EXPECTED_CLOSE_BRACE = "expected '}}'"
    EXPECTED_IDENT = "expected identifier"
    EXPECTED_RANGE_KEYWORD = "expected 'range'"
    EXPECTED_IF_KEYWORD = "expected 'if'"
    EXPECTED_END_KEYWORD = "expected 'end'"


class ParseError(CompileError):
    """
    Structural error with the position of the offending token.

    Attributes:
        kind: What the parser expected to find
        position: Offset of the offending token in the source text
        line: 1-based line of the offset
        column: 1-based column of the offset
        line_text: Source line containing the offset (without the newline)
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        position: int,
        line: int,
        column: int,
        line_text: str = "",
        detail: Optional[str] = None,
    ):
        self.kind = kind
        self.position = position
        self.line = line
        self.column = column
        self.line_text = line_text
        self.detail = detail

        message = kind.value if not detail else f"{kind.value} ({detail})"
        text = f"{message} at {line}:{column}"
        if line_text:
            text += f"\n  {line_text}\n  {' ' * (column - 1)}^"
        super().__init__(text)


class RenderError(TemplateError):
    """A compiled template could not be rendered against the given context."""
    pass


class FieldNotFoundError(RenderError):
    """A path segment is absent from the value it was looked up on."""

    def __init__(self, path: str, segment: str):
        self.path = path
        self.segment = segment
        if path == segment:
            super().__init__(f"Field '{path}' not found in context")
        else:
            super().__init__(f"Field '{segment}' not found while resolving '{path}'")


class NotIterableError(RenderError):
    """A range path resolved to something that is not a sequence of values."""

    def __init__(self, path: str, type_name: str):
        self.path = path
        self.type_name = type_name
        super().__init__(f"Cannot range over '{path}': value of type {type_name} is not a sequence")


class ConfigError(TemplateError):
    """Invalid render options (unknown key, wrong value type, bad document)."""
    pass


__all__ = [
    "TemplateError",
    "CompileError",
    "ParseErrorKind",
    "ParseError",
    "RenderError",
    "FieldNotFoundError",
    "NotIterableError",
    "ConfigError",
]
