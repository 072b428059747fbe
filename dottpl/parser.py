"""
Recursive-descent parser for templates.

Turns the flat token sequence into a declaration tree. Blocks ({{ range }}
and {{ if }}) parse their children recursively, so every nested block owns
its own {{ end }} and never closes an enclosing one.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .errors import ParseError, ParseErrorKind
from .lexer import tokenize_template
from .nodes import (
    BlockNode, ConditionalNode, EndNode, IdentNode, RangeNode, Span,
    TemplateAST, TemplateNode,
)
from .positions import locate
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

# Result of parsing one declaration: node (or None for '{{}}') and tokens consumed
ParseResult = Tuple[Optional[TemplateNode], int]


class TemplateParser:
    """
    Parser for {{ }} templates.

    Builds the AST from the lexer's tokens and reports the first structural
    error with its line, column and source line. There is no error recovery.
    """

    def __init__(self, text: str, tokens: Optional[List[Token]] = None):
        """
        Initializes the parser.

        Args:
            text: Template source; used for paths and error diagnostics
            tokens: Pre-computed tokens of ``text`` (tokenized if omitted)
        """
        self.text = text
        self.tokens = tokens if tokens is not None else tokenize_template(text)

    def parse(self) -> TemplateAST:
        """
        Parses all tokens into top-level declarations.

        Returns:
            Declarations in document order

        Raises:
            ParseError: On the first structural error
        """
        ast: TemplateAST = []
        index = 0

        while index < len(self.tokens):
            node, consumed = self._parse_one(index)
            if node is not None:
                if isinstance(node, EndNode):
                    logger.debug(f"Stray 'end' at offset {node.span.start} outside of any block")
                ast.append(node)
            index += consumed

        logger.debug(f"Parsed {len(self.tokens)} tokens into {len(ast)} top-level declarations")
        return ast

    def _parse_one(self, index: int) -> ParseResult:
        """
        Parses one declaration starting at ``tokens[index]``.

        Dispatches on the token that follows the opening brace.
        """
        first = self._token(index)
        if first is None or first.type is not TokenType.OPEN_BRACE:
            raise self._error(ParseErrorKind.EXPECTED_OPEN_BRACE, index)

        second = self._token(index + 1)
        if second is None:
            raise self._error(ParseErrorKind.EXPECTED_IDENT, index + 1)

        if second.type is TokenType.CLOSE_BRACE:
            # Empty '{{}}' is a no-op
            return None, 2
        if second.type is TokenType.IDENT:
            return self._parse_ident(index)
        if second.type is TokenType.RANGE:
            return self._parse_block(index, TokenType.RANGE)
        if second.type is TokenType.IF:
            return self._parse_block(index, TokenType.IF)
        if second.type is TokenType.END:
            return self._parse_end(index)

        raise self._error(ParseErrorKind.EXPECTED_IDENT, index + 1)

    def _parse_ident(self, index: int) -> ParseResult:
        """Parses {{ .path }}: OPEN_BRACE, IDENT, CLOSE_BRACE."""
        self._expect(index, TokenType.OPEN_BRACE, ParseErrorKind.EXPECTED_OPEN_BRACE)
        ident = self._expect(index + 1, TokenType.IDENT, ParseErrorKind.EXPECTED_IDENT)
        close = self._expect(index + 2, TokenType.CLOSE_BRACE, ParseErrorKind.EXPECTED_CLOSE_BRACE)

        node = IdentNode(span=Span(self.tokens[index].start, close.end), path=ident.slice(self.text))
        return node, 3

    def _parse_end(self, index: int) -> ParseResult:
        """Parses {{ end }}: OPEN_BRACE, END, CLOSE_BRACE."""
        self._expect(index, TokenType.OPEN_BRACE, ParseErrorKind.EXPECTED_OPEN_BRACE)
        self._expect(index + 1, TokenType.END, ParseErrorKind.EXPECTED_END_KEYWORD)
        close = self._expect(index + 2, TokenType.CLOSE_BRACE, ParseErrorKind.EXPECTED_CLOSE_BRACE)

        return EndNode(span=Span(self.tokens[index].start, close.end)), 3

    def _parse_block(self, index: int, keyword: TokenType) -> ParseResult:
        """
        Parses a {{ range .path }} or {{ if .path }} block with its body.

        The header is OPEN_BRACE, keyword, IDENT, CLOSE_BRACE. Children are
        then parsed one by one until a child is the block's EndNode.

        Args:
            index: Index of the header's opening brace
            keyword: TokenType.RANGE or TokenType.IF

        Returns:
            Block node and the number of tokens consumed, body included

        Raises:
            ParseError: EXPECTED_END_KEYWORD when tokens run out before 'end'
        """
        keyword_kind = (
            ParseErrorKind.EXPECTED_RANGE_KEYWORD if keyword is TokenType.RANGE
            else ParseErrorKind.EXPECTED_IF_KEYWORD
        )

        self._expect(index, TokenType.OPEN_BRACE, ParseErrorKind.EXPECTED_OPEN_BRACE)
        self._expect(index + 1, keyword, keyword_kind)
        ident = self._expect(index + 2, TokenType.IDENT, ParseErrorKind.EXPECTED_IDENT)
        close = self._expect(index + 3, TokenType.CLOSE_BRACE, ParseErrorKind.EXPECTED_CLOSE_BRACE)

        header = Span(self.tokens[index].start, close.end)
        body: List[TemplateNode] = []
        position = index + 4

        while True:
            if position >= len(self.tokens):
                raise self._error(
                    ParseErrorKind.EXPECTED_END_KEYWORD,
                    index,
                    detail=f"unterminated '{keyword.value.lower()}' block",
                )

            child, consumed = self._parse_one(position)
            position += consumed
            if child is None:
                continue

            body.append(child)
            if isinstance(child, EndNode):
                break

        node_cls = RangeNode if keyword is TokenType.RANGE else ConditionalNode
        node: BlockNode = node_cls(span=header, path=ident.slice(self.text), body=tuple(body))

        logger.debug(
            f"Matched {node_cls.__name__} '{node.path}' at {header.start}:{node.outer_span.end} "
            f"with {len(body) - 1} children"
        )
        return node, position - index

    # Token helpers

    def _token(self, index: int) -> Optional[Token]:
        """Returns the token at ``index`` or None past the end."""
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def _expect(self, index: int, token_type: TokenType, kind: ParseErrorKind) -> Token:
        """Returns the token at ``index`` if it has the expected type, else raises."""
        token = self._token(index)
        if token is None or token.type is not token_type:
            raise self._error(kind, index)
        return token

    def _error(self, kind: ParseErrorKind, index: int, detail: Optional[str] = None) -> ParseError:
        """
        Builds a ParseError located at the offending token.

        When the token stream ended early, the error points just past the
        last token.
        """
        token = self._token(index)
        if token is not None:
            position = token.start
        elif self.tokens:
            position = self.tokens[-1].end
        else:
            position = len(self.text)

        location = locate(self.text, position)
        logger.debug(f"Parse error {kind.name} at offset {position}")
        return ParseError(
            kind,
            position=position,
            line=location.line,
            column=location.column,
            line_text=location.line_text,
            detail=detail,
        )


def parse_template(text: str) -> TemplateAST:
    """
    Convenience function for parsing a template.

    Args:
        text: Template source

    Returns:
        Top-level declarations

    Raises:
        ParseError: On the first structural error
    """
    parser = TemplateParser(text)
    return parser.parse()


__all__ = ["TemplateParser", "parse_template"]
