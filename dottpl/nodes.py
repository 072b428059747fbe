"""
AST nodes (declarations) of the template engine.

Every node is immutable and refers to the template source only through
offsets, so one tree can be rendered many times against different contexts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union


@dataclass(frozen=True)
class Span:
    """
    Offsets of a complete '{{ ... }}' directive.

    ``start`` is the offset of the first '{', ``end`` is just past '}}'.
    """
    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


@dataclass(frozen=True)
class TemplateNode:
    """Base class for all declarations."""
    span: Span


@dataclass(frozen=True)
class IdentNode(TemplateNode):
    """Field substitution: {{ .path }}"""
    path: str


@dataclass(frozen=True)
class EndNode(TemplateNode):
    """Closing marker {{ end }}; terminates exactly one enclosing block."""
    pass


@dataclass(frozen=True)
class BlockNode(TemplateNode):
    """
    Common shape of {{ range }} and {{ if }} blocks.

    ``span`` covers the opening header only. ``body`` holds the child
    declarations in document order and always ends with the block's own
    EndNode, whose span marks where the whole block stops.
    """
    path: str
    body: Tuple[TemplateNode, ...]

    @property
    def end_node(self) -> EndNode:
        return self.body[-1]  # type: ignore[return-value]

    @property
    def children(self) -> Tuple[TemplateNode, ...]:
        """Body declarations without the closing EndNode."""
        return self.body[:-1]

    @property
    def outer_span(self) -> Span:
        """Span from the header's '{' to just past the closing '{{ end }}'."""
        return Span(self.span.start, self.end_node.span.end)


@dataclass(frozen=True)
class ConditionalNode(BlockNode):
    """Conditional block: {{ if .path }}...{{ end }}"""
    pass


@dataclass(frozen=True)
class RangeNode(BlockNode):
    """Iteration block: {{ range .path }}...{{ end }}"""
    pass


Declaration = Union[IdentNode, ConditionalNode, RangeNode, EndNode]

# Alias for a list of top-level declarations (AST)
TemplateAST = List[TemplateNode]


def format_ast_tree(ast: TemplateAST, text: str, indent: int = 0) -> str:
    """Formats the AST as a tree for debugging."""
    lines = []
    prefix = "  " * indent

    for node in ast:
        location = f"{node.span.slice(text)!r} @ {node.span.start}:{node.span.end}"
        if isinstance(node, IdentNode):
            lines.append(f"{prefix}IdentNode(path='{node.path}') {location}")
        elif isinstance(node, BlockNode):
            lines.append(f"{prefix}{type(node).__name__}(path='{node.path}') {location}")
            lines.append(format_ast_tree(list(node.body), text, indent + 1))
        elif isinstance(node, EndNode):
            lines.append(f"{prefix}EndNode {location}")
        else:
            lines.append(f"{prefix}{type(node).__name__} {location}")

    return "\n".join(line for line in lines if line)


__all__ = [
    "Span",
    "TemplateNode",
    "IdentNode",
    "EndNode",
    "BlockNode",
    "ConditionalNode",
    "RangeNode",
    "Declaration",
    "TemplateAST",
    "format_ast_tree",
]
