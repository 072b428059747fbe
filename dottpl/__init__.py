"""
Minimal text-templating engine with {{ }} directives.

Supports field substitution ({{ .a.b }}), conditionals ({{ if .x }}...{{ end }})
and iteration ({{ range .xs }}...{{ end }}). Literal text is reproduced
byte-for-byte.
"""

from .config import RenderOptions, load_options
from .errors import (
    CompileError,
    ConfigError,
    FieldNotFoundError,
    NotIterableError,
    ParseError,
    ParseErrorKind,
    RenderError,
    TemplateError,
)
from .protocols import FieldSource, OutputSink
from .template import CompiledTemplate, compile_template, render_string

__all__ = [
    # Main entry points
    "compile_template",
    "render_string",
    "CompiledTemplate",
    "RenderOptions",
    "load_options",

    # Collaborator protocols
    "FieldSource",
    "OutputSink",

    # Exceptions
    "TemplateError",
    "CompileError",
    "ParseError",
    "ParseErrorKind",
    "RenderError",
    "FieldNotFoundError",
    "NotIterableError",
    "ConfigError",
]
