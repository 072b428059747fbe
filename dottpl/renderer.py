"""
Tree-walking renderer.

Walks the declaration tree against a context value and writes to an output
sink. Literal text is never stored in the tree: it is sliced from the
template source between directive spans, so the output reproduces every
byte outside the directives exactly.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .config import DEFAULT_OPTIONS, RenderOptions
from .errors import FieldNotFoundError
from .nodes import (
    BlockNode, ConditionalNode, EndNode, IdentNode, RangeNode, TemplateNode,
)
from .protocols import OutputSink
from .resolver import is_truthy, resolve_path, resolve_sequence

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Renderer for one template source.

    Holds only immutable data (the source text and options); all per-render
    state lives on the call stack, so a single renderer can serve concurrent
    renders against independent contexts and sinks.
    """

    def __init__(self, text: str, options: RenderOptions = DEFAULT_OPTIONS):
        """
        Args:
            text: Template source the declarations were parsed from
            options: Rendering options
        """
        self.text = text
        self.options = options

    def render(self, declarations: Sequence[TemplateNode], context: Any, sink: OutputSink) -> None:
        """
        Renders top-level declarations and the literal text around them.

        Args:
            declarations: Parsed declarations of ``self.text``
            context: Root context value
            sink: Output sink

        Raises:
            RenderError: If a path cannot be resolved or a range target is not a sequence
        """
        self._render_nodes(declarations, context, sink, 0, len(self.text))

    def _render_nodes(
        self,
        nodes: Sequence[TemplateNode],
        context: Any,
        sink: OutputSink,
        start: int,
        stop: int,
    ) -> None:
        """
        Renders sibling declarations of one region of the source.

        Args:
            nodes: Declarations in document order
            context: Current scope
            sink: Output sink
            start: Offset where the region's literal text begins
            stop: Offset where the region's literal text ends
        """
        last_offset = start

        for node in nodes:
            if isinstance(node, IdentNode):
                self._emit(sink, last_offset, node.span.start)
                self._write(sink, self._format_value(resolve_path(context, node.path)))
                last_offset = node.span.end

            elif isinstance(node, ConditionalNode):
                self._emit(sink, last_offset, node.span.start)
                self._render_conditional(node, context, sink)
                last_offset = node.outer_span.end

            elif isinstance(node, RangeNode):
                self._emit(sink, last_offset, node.span.start)
                self._render_range(node, context, sink)
                last_offset = node.outer_span.end

            elif isinstance(node, EndNode):
                self._emit(sink, last_offset, node.span.start)
                last_offset = node.span.end

            else:
                raise TypeError(f"Unknown declaration type: {type(node).__name__}")

        self._emit(sink, last_offset, stop)

    def _render_conditional(self, node: ConditionalNode, context: Any, sink: OutputSink) -> None:
        """
        Renders an {{ if }} block.

        The body shares the current scope. When the condition is false the
        whole block, literal text included, produces no output.
        """
        try:
            value = resolve_path(context, node.path)
        except FieldNotFoundError:
            if not self.options.missing_condition_false:
                raise
            logger.debug(f"Condition '{node.path}' not resolved, treated as false")
            return

        if is_truthy(value):
            self._render_body(node, context, sink)

    def _render_range(self, node: RangeNode, context: Any, sink: OutputSink) -> None:
        """
        Renders a {{ range }} block once per element.

        Inside the body the element is the only scope; fields of the
        enclosing context are not visible.
        """
        elements = resolve_sequence(context, node.path)
        logger.debug(f"Range '{node.path}' over {len(elements)} elements")

        for element in elements:
            self._render_body(node, element, sink)

    def _render_body(self, node: BlockNode, context: Any, sink: OutputSink) -> None:
        """Renders block children between the header and the closing {{ end }}."""
        self._render_nodes(node.children, context, sink, node.span.end, node.end_node.span.start)

    def _format_value(self, value: Any) -> str:
        """Natural text form of a substituted value; no escaping."""
        if value is None and self.options.none_as_empty:
            return ""
        return str(value)

    def _emit(self, sink: OutputSink, start: int, stop: int) -> None:
        """Writes the literal source text between two offsets."""
        if start < stop:
            sink.write(self.text[start:stop])

    @staticmethod
    def _write(sink: OutputSink, text: str) -> None:
        if text:
            sink.write(text)


__all__ = ["TemplateRenderer"]
