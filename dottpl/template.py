"""
Public entry points: compile once, render many times.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .config import DEFAULT_OPTIONS, RenderOptions
from .errors import CompileError, RenderError
from .lexer import tokenize_template
from .nodes import TemplateNode, format_ast_tree
from .parser import TemplateParser
from .protocols import OutputSink
from .renderer import TemplateRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Parsed template together with the source text it refers to.

    The declarations hold offsets into ``text`` only, so the two are kept
    side by side and never separated. Instances are immutable and may be
    rendered concurrently.
    """
    text: str
    declarations: Tuple[TemplateNode, ...]

    def render(self, context: Any, sink: OutputSink, options: Optional[RenderOptions] = None) -> None:
        """
        Renders the template into a sink.

        Args:
            context: Context value (mapping, object, or FieldSource)
            sink: Object with a write(str) method
            options: Rendering options (defaults if omitted)

        Raises:
            RenderError: If a field cannot be resolved or ranged over,
                or if blocks are nested deeper than the interpreter stack allows.
                Exceptions from the sink propagate unchanged and may leave
                a partial prefix written.
        """
        renderer = TemplateRenderer(self.text, options or DEFAULT_OPTIONS)
        try:
            renderer.render(self.declarations, context, sink)
        except RecursionError as e:
            raise RenderError("Template blocks are nested too deeply to render") from e

    def render_to_string(self, context: Any, options: Optional[RenderOptions] = None) -> str:
        """Renders the template into a new string."""
        buffer = io.StringIO()
        self.render(context, buffer, options)
        return buffer.getvalue()

    def format_tree(self) -> str:
        """Indented listing of the declaration tree for debugging."""
        return format_ast_tree(list(self.declarations), self.text)


def compile_template(text: str) -> CompiledTemplate:
    """
    Tokenizes and parses a template.

    Args:
        text: Template source

    Returns:
        Compiled template ready for rendering

    Raises:
        ParseError: On the first structural error
        CompileError: If blocks are nested too deeply to parse
    """
    tokens = tokenize_template(text)
    try:
        declarations = TemplateParser(text, tokens).parse()
    except RecursionError as e:
        raise CompileError("Template blocks are nested too deeply to parse") from e
    logger.debug(f"Compiled template: {len(tokens)} tokens, {len(declarations)} declarations")
    return CompiledTemplate(text=text, declarations=tuple(declarations))


def render_string(text: str, context: Any, options: Optional[RenderOptions] = None) -> str:
    """
    Compiles and renders a template in one step.

    Prefer compile_template() when the same template is rendered repeatedly.
    """
    return compile_template(text).render_to_string(context, options)


__all__ = ["CompiledTemplate", "compile_template", "render_string"]
